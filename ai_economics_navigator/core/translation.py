"""
Translation cost engine.

Computes the one-time migration cost and the recurring monthly cost of
translating a document corpus into one or more languages, with an optional
human-review overlay.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from .catalog import TRANSLATION_MODELS
from .normalize import non_negative, normalize_number
from .projection import CostBreakdown, ProjectionPoint, project_setup_then_recurring

logger = logging.getLogger(__name__)

VALID_LANGUAGE_MULTIPLIERS = (1, 3, 10, 20)


class QualityTier(Enum):
    """Share of translated characters sent for human review."""
    NONE = "none"
    BASIC = "basic"
    FULL = "full"

    @property
    def review_fraction(self) -> float:
        return _REVIEW_FRACTIONS[self]

    @classmethod
    def resolve(cls, value: Any) -> "QualityTier":
        """Map a tier name (or tier) to a QualityTier, defaulting to NONE."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.NONE


_REVIEW_FRACTIONS = {
    QualityTier.NONE: 0.0,
    QualityTier.BASIC: 0.03,
    QualityTier.FULL: 0.20,
}


@dataclass(frozen=True)
class TranslationParameters:
    """Inputs for the translation scenario.

    ``base_cost_per_thousand_chars`` of None means "use the selected
    model's catalog rate".
    """
    model_id: str = "gemini-3-pro"
    characters_per_document: Any = 2000
    document_count: Any = 500
    monthly_growth_percent: Any = 5
    language_multiplier: Any = 1
    quality_tier: Any = QualityTier.NONE
    base_cost_per_thousand_chars: Any = None
    human_review_cost_per_thousand_chars: Any = 0.05


@dataclass(frozen=True)
class TranslationResult:
    """Complete translation cost computation result."""
    language_multiplier: int
    quality_tier: QualityTier
    base_cost_per_thousand_chars: float
    document_count: float
    characters_per_document: float
    monthly_growth_percent: float
    base_characters: float
    total_initial_characters: float
    initial_review_characters: float
    initial: CostBreakdown
    monthly_new_documents: float
    monthly_new_characters: float
    monthly_review_characters: float
    monthly: CostBreakdown
    projection: List[ProjectionPoint] = field(default_factory=list)

    @property
    def initial_api_cost(self) -> float:
        return self.initial["api"]

    @property
    def initial_review_cost(self) -> float:
        return self.initial["review"]

    @property
    def initial_total(self) -> float:
        return self.initial.total

    @property
    def monthly_api_cost(self) -> float:
        return self.monthly["api"]

    @property
    def monthly_review_cost(self) -> float:
        return self.monthly["review"]

    @property
    def monthly_total(self) -> float:
        return self.monthly.total

    @property
    def total_year1(self) -> float:
        return self.projection[-1].cumulative_cost

    def to_snapshot(self) -> Dict[str, Any]:
        """JSON-serializable view for the narrative collaborator."""
        return {
            "language_multiplier": self.language_multiplier,
            "quality_tier": self.quality_tier.value,
            "total_initial_characters": self.total_initial_characters,
            "initial_costs": self.initial.to_dict(),
            "initial_total": self.initial_total,
            "monthly_new_documents": self.monthly_new_documents,
            "monthly_costs": self.monthly.to_dict(),
            "monthly_total": self.monthly_total,
            "total_year1": self.total_year1,
        }


def resolve_language_multiplier(value: Any) -> int:
    """Snap to one of the supported language tiers, defaulting to 1."""
    number = normalize_number(value, 1)
    for tier in VALID_LANGUAGE_MULTIPLIERS:
        if number == tier:
            return tier
    return 1


def resolve_base_cost(params: TranslationParameters) -> float:
    """Per-1k-character API rate, falling back to the catalog model's rate."""
    if params.base_cost_per_thousand_chars is None:
        model = TRANSLATION_MODELS.get(params.model_id)
        return model.cost_per_million_chars / 1000
    return non_negative(params.base_cost_per_thousand_chars)


def compute_translation_costs(params: TranslationParameters) -> TranslationResult:
    """Compute migration, recurring and 12-month cumulative translation cost.

    Month 1 of the projection equals the initial setup cost; recurring cost
    accrues from the following month.

    Args:
        params: Translation scenario inputs (raw values are normalized)

    Returns:
        TranslationResult with cost breakdowns and projection

    Raises:
        ValueError: If no base rate is given and the model is not in the catalog
    """
    multiplier = resolve_language_multiplier(params.language_multiplier)
    tier = QualityTier.resolve(params.quality_tier)
    base_rate = resolve_base_cost(params)
    review_rate = non_negative(params.human_review_cost_per_thousand_chars)

    documents = non_negative(params.document_count)
    chars_per_doc = non_negative(params.characters_per_document)
    growth_percent = non_negative(params.monthly_growth_percent)

    # Initial migration
    base_characters = documents * chars_per_doc
    total_initial_characters = base_characters * multiplier
    initial_api_cost = (total_initial_characters / 1000) * base_rate
    initial_review_characters = total_initial_characters * tier.review_fraction
    initial_review_cost = (initial_review_characters / 1000) * review_rate

    # Recurring growth
    monthly_new_documents = documents * (growth_percent / 100)
    monthly_new_characters = monthly_new_documents * chars_per_doc * multiplier
    monthly_api_cost = (monthly_new_characters / 1000) * base_rate
    monthly_review_characters = monthly_new_characters * tier.review_fraction
    monthly_review_cost = (monthly_review_characters / 1000) * review_rate

    initial = CostBreakdown({"api": initial_api_cost, "review": initial_review_cost})
    monthly = CostBreakdown({"api": monthly_api_cost, "review": monthly_review_cost})

    logger.debug(
        "Translation: %s chars x%d, initial=%.4f monthly=%.4f",
        total_initial_characters, multiplier, initial.total, monthly.total,
    )

    return TranslationResult(
        language_multiplier=multiplier,
        quality_tier=tier,
        base_cost_per_thousand_chars=base_rate,
        document_count=documents,
        characters_per_document=chars_per_doc,
        monthly_growth_percent=growth_percent,
        base_characters=base_characters,
        total_initial_characters=total_initial_characters,
        initial_review_characters=initial_review_characters,
        initial=initial,
        monthly_new_documents=monthly_new_documents,
        monthly_new_characters=monthly_new_characters,
        monthly_review_characters=monthly_review_characters,
        monthly=monthly,
        projection=project_setup_then_recurring(initial.components, monthly.components),
    )
