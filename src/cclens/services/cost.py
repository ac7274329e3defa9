"""Model pricing table and cost calculation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

_PER_MILLION = 1_000_000


@dataclass(frozen=True, slots=True)
class ModelPricing:
    """USD rates per million tokens."""

    input: float
    output: float
    cache_write: float
    cache_read: float


# Prices per million tokens (USD), as of Dec 2025.
# Source: Anthropic pricing page
_SONNET = ModelPricing(input=3.0, output=15.0, cache_write=3.75, cache_read=0.3)
_HAIKU = ModelPricing(input=1.0, output=5.0, cache_write=1.25, cache_read=0.1)

MODEL_PRICING: Mapping[str, ModelPricing] = MappingProxyType(
    {
        "claude-opus-4-5-20251101": ModelPricing(
            input=5.0, output=25.0, cache_write=6.25, cache_read=0.5
        ),
        "claude-sonnet-4-5-20241022": _SONNET,
        "claude-sonnet-4-20250514": _SONNET,
        "claude-3-5-sonnet-20241022": _SONNET,
        "claude-haiku-4-5-20241022": _HAIKU,
        "claude-haiku-4-5-20251001": _HAIKU,
        "claude-3-5-haiku-20241022": _HAIKU,
    }
)

# Default pricing for unknown models (use Sonnet-level pricing)
DEFAULT_PRICING = _SONNET


@dataclass(frozen=True)
class PricingTable:
    """Exact-match pricing lookup with a fallback entry."""

    rates: Mapping[str, ModelPricing] = field(default_factory=lambda: MODEL_PRICING)
    default: ModelPricing = DEFAULT_PRICING

    def resolve(self, model_id: str | None) -> ModelPricing:
        """Get pricing for a model, falling back to the default entry."""
        return self.rates.get(model_id or "", self.default)


DEFAULT_PRICING_TABLE = PricingTable()


def calculate_cost(
    pricing: ModelPricing,
    input_tokens: int = 0,
    output_tokens: int = 0,
    cache_creation_tokens: int = 0,
    cache_read_tokens: int = 0,
) -> float:
    """Total USD cost of one usage record at the given rates."""
    return estimate_cost(
        pricing,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        cache_creation_tokens=cache_creation_tokens,
        cache_read_tokens=cache_read_tokens,
    )["total_cost"]


def estimate_cost(
    pricing: ModelPricing,
    input_tokens: int = 0,
    output_tokens: int = 0,
    cache_creation_tokens: int = 0,
    cache_read_tokens: int = 0,
) -> dict[str, float]:
    """Estimate cost for token usage.

    Returns:
        Dict with input_cost, output_cost, cache_read_cost, cache_creation_cost, total_cost.
    """
    input_cost = (input_tokens / _PER_MILLION) * pricing.input
    output_cost = (output_tokens / _PER_MILLION) * pricing.output
    cache_creation_cost = (cache_creation_tokens / _PER_MILLION) * pricing.cache_write
    cache_read_cost = (cache_read_tokens / _PER_MILLION) * pricing.cache_read

    return {
        "input_cost": input_cost,
        "output_cost": output_cost,
        "cache_read_cost": cache_read_cost,
        "cache_creation_cost": cache_creation_cost,
        "total_cost": input_cost + output_cost + cache_creation_cost + cache_read_cost,
    }
