"""Configuration for the payment matcher.

Pydantic-based configuration; every setting can be overridden through the
environment for production deployment.

Environment Variables:
- RENTRECON_MATCHER_PHONE_MATCH_WEIGHT: Phone evidence weight (default: 0.35)
- RENTRECON_MATCHER_AMOUNT_MATCH_WEIGHT: Amount evidence weight (default: 0.35)
- RENTRECON_MATCHER_REFERENCE_MATCH_WEIGHT: Reference evidence weight (default: 0.20)
- RENTRECON_MATCHER_NAME_MATCH_WEIGHT: Name evidence weight (default: 0.10)
- RENTRECON_MATCHER_FUZZY_THRESHOLD: Floor of the FUZZY band (default: 0.70)
- RENTRECON_MATCHER_AMOUNT_TOLERANCE_PERCENT: Amount tolerance, % of balance (default: 1)

The weights are validated together with the fixed classification
thresholds (0.95 / 0.5): they must sum to 1.0 so that a perfect match on
every field yields a confidence of 1.0.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Fixed classification boundaries; only the FUZZY floor is configurable.
EXACT_THRESHOLD = 0.95
PARTIAL_THRESHOLD = 0.5

WEIGHT_SUM_TOLERANCE = 0.01


class MatcherConfig(BaseSettings):
    """Weights and thresholds for payment-to-invoice matching.

    Instances are immutable once constructed, so one config may be shared
    between reconciliation runs in different threads.

    Example:
        >>> config = MatcherConfig(fuzzy_threshold=0.8)
        >>> config.phone_match_weight
        0.35
    """

    model_config = SettingsConfigDict(
        env_prefix="RENTRECON_MATCHER_",
        case_sensitive=False,
        extra="forbid",
        frozen=True,
    )

    phone_match_weight: float = Field(
        default=0.35,
        ge=0.0,
        le=1.0,
        description="Weight of phone number evidence",
    )

    amount_match_weight: float = Field(
        default=0.35,
        ge=0.0,
        le=1.0,
        description="Weight of amount-vs-balance evidence",
    )

    reference_match_weight: float = Field(
        default=0.20,
        ge=0.0,
        le=1.0,
        description="Weight of account reference evidence",
    )

    name_match_weight: float = Field(
        default=0.10,
        ge=0.0,
        le=1.0,
        description="Weight of customer name evidence",
    )

    fuzzy_threshold: float = Field(
        default=0.70,
        ge=0.0,
        le=1.0,
        description="Minimum confidence for a FUZZY (auto-accepted) match",
    )

    amount_tolerance_percent: float = Field(
        default=1.0,
        ge=0.0,
        le=100.0,
        description="Amount tolerance as a percentage of the invoice balance",
    )

    @model_validator(mode="after")
    def check_weights(self) -> "MatcherConfig":
        """Reject weights that cannot produce a confidence in [0, 1]."""
        total = self.total_weight
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Match weights must sum to 1.0, got {total:.4f}")
        return self

    @property
    def total_weight(self) -> float:
        """Sum of the four field weights (the maximum attainable confidence)."""
        return (
            self.phone_match_weight
            + self.amount_match_weight
            + self.reference_match_weight
            + self.name_match_weight
        )
