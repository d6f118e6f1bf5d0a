"""
Pricing calculations for Claude models.

Estimates the cost of a usage entry when the log line does not report one.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_UP
from typing import Dict, Optional

from .token_counter import TokenUsage
from claude_contribs.storage.models import UsageEntry

ONE_MILLION = Decimal("1000000")


@dataclass(frozen=True)
class ModelPricing:
    """Per-token pricing for a model family, in USD per million tokens."""
    input_per_mtok: Decimal
    output_per_mtok: Decimal
    cache_write_per_mtok: Decimal
    cache_read_per_mtok: Decimal


@dataclass(frozen=True)
class PricingTable:
    """Fixed pricing table keyed by model id prefix."""
    prices: Dict[str, ModelPricing]

    def find_pricing(self, model: Optional[str]) -> Optional[ModelPricing]:
        """Find pricing for a model id.

        An exact key wins; otherwise the longest key that prefixes the
        model id is used, so dated ids such as "claude-sonnet-4-20250514"
        resolve to their family.
        """
        if not model:
            return None
        if model in self.prices:
            return self.prices[model]
        matches = [key for key in self.prices if model.startswith(key)]
        if not matches:
            return None
        return self.prices[max(matches, key=len)]

    def get_pricing(self, model: str) -> ModelPricing:
        """Get pricing for a specific model.
        
        Args:
            model: Model identifier
            
        Returns:
            ModelPricing for the model or its family
            
        Raises:
            ValueError: If model is not supported
        """
        pricing = self.find_pricing(model)
        if pricing is None:
            raise ValueError(f"Unsupported model: {model}")
        return pricing


# Fixed pricing table - no dynamic fetching
PRICING_TABLE = PricingTable({
    "claude-opus-4-5": ModelPricing(
        input_per_mtok=Decimal("5.00"),
        output_per_mtok=Decimal("25.00"),
        cache_write_per_mtok=Decimal("6.25"),
        cache_read_per_mtok=Decimal("0.50")
    ),
    "claude-opus-4": ModelPricing(
        input_per_mtok=Decimal("15.00"),
        output_per_mtok=Decimal("75.00"),
        cache_write_per_mtok=Decimal("18.75"),
        cache_read_per_mtok=Decimal("1.50")
    ),
    "claude-sonnet-4": ModelPricing(
        input_per_mtok=Decimal("3.00"),
        output_per_mtok=Decimal("15.00"),
        cache_write_per_mtok=Decimal("3.75"),
        cache_read_per_mtok=Decimal("0.30")
    ),
    "claude-haiku-4-5": ModelPricing(
        input_per_mtok=Decimal("1.00"),
        output_per_mtok=Decimal("5.00"),
        cache_write_per_mtok=Decimal("1.25"),
        cache_read_per_mtok=Decimal("0.10")
    ),
    "claude-3-7-sonnet": ModelPricing(
        input_per_mtok=Decimal("3.00"),
        output_per_mtok=Decimal("15.00"),
        cache_write_per_mtok=Decimal("3.75"),
        cache_read_per_mtok=Decimal("0.30")
    ),
    "claude-3-5-sonnet": ModelPricing(
        input_per_mtok=Decimal("3.00"),
        output_per_mtok=Decimal("15.00"),
        cache_write_per_mtok=Decimal("3.75"),
        cache_read_per_mtok=Decimal("0.30")
    ),
    "claude-3-5-haiku": ModelPricing(
        input_per_mtok=Decimal("0.80"),
        output_per_mtok=Decimal("4.00"),
        cache_write_per_mtok=Decimal("1.00"),
        cache_read_per_mtok=Decimal("0.08")
    ),
    "claude-3-opus": ModelPricing(
        input_per_mtok=Decimal("15.00"),
        output_per_mtok=Decimal("75.00"),
        cache_write_per_mtok=Decimal("18.75"),
        cache_read_per_mtok=Decimal("1.50")
    ),
    "claude-3-haiku": ModelPricing(
        input_per_mtok=Decimal("0.25"),
        output_per_mtok=Decimal("1.25"),
        cache_write_per_mtok=Decimal("0.30"),
        cache_read_per_mtok=Decimal("0.03")
    ),
})


def calculate_cost(model: str, usage: TokenUsage) -> float:
    """Calculate the cost of a usage block with conservative rounding.
    
    Args:
        model: Model identifier
        usage: Token usage data
        
    Returns:
        Total cost in USD rounded UP to 6 decimal places
        
    Raises:
        ValueError: If model is not supported
    """
    pricing = PRICING_TABLE.get_pricing(model)

    # Sum each counter at its per-million-token rate
    total_cost = (
        Decimal(usage.input_tokens) * pricing.input_per_mtok
        + Decimal(usage.output_tokens) * pricing.output_per_mtok
        + Decimal(usage.cache_creation_tokens) * pricing.cache_write_per_mtok
        + Decimal(usage.cache_read_tokens) * pricing.cache_read_per_mtok
    ) / ONE_MILLION

    # Total cost with conservative rounding (always round UP)
    rounded_cost = total_cost.quantize(Decimal("0.000001"), rounding=ROUND_UP)

    return float(rounded_cost)


def estimate_entry_cost(entry: UsageEntry) -> float:
    """Cost of one entry: the reported costUSD when present, else an estimate.

    Entries for models missing from the pricing table cost 0.0.
    """
    if entry.cost_usd is not None:
        return entry.cost_usd
    if PRICING_TABLE.find_pricing(entry.model) is None:
        return 0.0
    return calculate_cost(entry.model, entry.usage)
