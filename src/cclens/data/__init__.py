"""Log decoding, normalization, correlation and discovery."""
