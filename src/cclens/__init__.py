"""Claude Code session log parser."""
