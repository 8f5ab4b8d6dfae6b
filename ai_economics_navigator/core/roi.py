"""
Productivity ROI projection engine.

Compares monetized time savings against a composite AI operating cost made
of three pillars:

1. Inference - tokens consumed by user requests
2. Orchestration & data - vector database base fee plus periodic re-embedding
3. Governance - human review of a share of AI outputs
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Union

from .normalize import clamp_percent, non_negative, safe_divide
from .projection import CostBreakdown, ProjectionPoint, project_linear
from .rag import RagResult
from .translation import TranslationResult

logger = logging.getLogger(__name__)

# Assumed average tokens re-embedded per indexed document
REINDEX_TOKENS_PER_DOCUMENT = 800
NOT_COMPUTABLE = "—"
MINIMUM_TARGET_REVIEW_RATE = 15
REDUCED_ADOPTION_FACTOR = 0.6


@dataclass(frozen=True)
class RoiParameters:
    """Inputs for the productivity ROI scenario."""
    # Productivity value drivers
    time_saved_per_request_minutes: Any = 5
    requests_per_user_per_month: Any = 200
    employee_hourly_rate: Any = 45
    user_count: Any = 50

    # Inference drivers
    avg_tokens_per_request: Any = 1500
    cost_per_million_tokens: Any = 0.50

    # Orchestration & data drivers
    indexed_document_count: Any = 1000
    reindexing_frequency_per_year: Any = 4
    embedding_cost_per_million: Any = 0.10
    vector_db_base_monthly: Any = 70

    # Governance drivers
    percent_outputs_reviewed: Any = 10
    review_minutes_per_output: Any = 2
    reviewer_hourly_rate: Any = 60


@dataclass(frozen=True)
class ScenarioVariant:
    """Net monthly gain under adjusted time-saved and adoption assumptions."""
    name: str
    description: str
    time_saved_factor: float
    adoption: float
    effective_users: float
    monthly_value: float
    monthly_cost: float
    net_monthly_gain: float


@dataclass(frozen=True)
class SensitivityCallouts:
    """Thresholds that show how fragile the base case is."""
    break_even_minutes: float
    target_review_rate: float
    total_cost_at_target_review: float
    users_at_60_percent: int
    net_gain_at_60_percent: float


@dataclass(frozen=True)
class RoiResult:
    """Complete ROI computation result."""
    monthly_requests: float
    hours_saved_monthly: float
    pillars: CostBreakdown
    total_ai_monthly_cost: float
    monthly_productivity_value: float
    projection: List[ProjectionPoint] = field(default_factory=list)
    scenarios: List[ScenarioVariant] = field(default_factory=list)
    sensitivity: Optional[SensitivityCallouts] = None

    @property
    def net_monthly_gain(self) -> float:
        return self.monthly_productivity_value - self.total_ai_monthly_cost

    @property
    def roi_ratio(self) -> Optional[float]:
        """Value per unit of AI cost; None when the cost is zero."""
        if self.total_ai_monthly_cost == 0:
            return None
        return self.monthly_productivity_value / self.total_ai_monthly_cost

    def scenario(self, name: str) -> ScenarioVariant:
        for variant in self.scenarios:
            if variant.name == name:
                return variant
        raise ValueError(f"Unknown scenario variant: {name}")

    def to_snapshot(self) -> Dict[str, Any]:
        """JSON-serializable view for the narrative collaborator."""
        return {
            "pillars": self.pillars.to_dict(),
            "total_ai_monthly_cost": self.total_ai_monthly_cost,
            "monthly_productivity_value": self.monthly_productivity_value,
            "net_monthly_gain": self.net_monthly_gain,
            "roi_ratio": format_roi_ratio(self.roi_ratio),
            "scenarios": {s.name: s.net_monthly_gain for s in self.scenarios},
        }


def format_roi_ratio(ratio: Optional[float]) -> str:
    """Render the ROI ratio, using a dash when it is not computable."""
    if ratio is None:
        return NOT_COMPUTABLE
    return f"{ratio:.2f}"


def _inference_cost(params: RoiParameters, requests: float) -> float:
    return (requests * non_negative(params.avg_tokens_per_request) / 1_000_000) * non_negative(
        params.cost_per_million_tokens
    )


def _governance_cost(params: RoiParameters, requests: float, review_percent: float) -> float:
    reviewed = requests * (review_percent / 100)
    return reviewed * (non_negative(params.review_minutes_per_output) / 60) * non_negative(
        params.reviewer_hourly_rate
    )


def _orchestration_cost(params: RoiParameters) -> float:
    reindex = (
        (non_negative(params.indexed_document_count) * REINDEX_TOKENS_PER_DOCUMENT / 1_000_000)
        * non_negative(params.embedding_cost_per_million)
        * (non_negative(params.reindexing_frequency_per_year) / 12)
    )
    return non_negative(params.vector_db_base_monthly) + reindex


def _productivity_value(params: RoiParameters, requests: float, minutes_saved: float) -> float:
    return (minutes_saved / 60) * requests * non_negative(params.employee_hourly_rate)


def compute_cost_pillars(params: RoiParameters) -> CostBreakdown:
    """Monthly AI operating cost split into inference, orchestration and governance."""
    requests = non_negative(params.user_count) * non_negative(params.requests_per_user_per_month)
    return CostBreakdown({
        "inference": _inference_cost(params, requests),
        "orchestration": _orchestration_cost(params),
        "governance": _governance_cost(params, requests, clamp_percent(params.percent_outputs_reviewed)),
    })


def compute_scenarios(
    params: RoiParameters,
    orchestration_cost: float,
    base_monthly_cost: float,
) -> List[ScenarioVariant]:
    """Conservative, Base Case and Optimistic net gain.

    Inference and governance scale with the adjusted request volume;
    orchestration is held fixed.
    """
    users = non_negative(params.user_count)
    per_user = non_negative(params.requests_per_user_per_month)
    minutes = non_negative(params.time_saved_per_request_minutes)
    review_percent = clamp_percent(params.percent_outputs_reviewed)

    def variant(name: str, description: str, time_factor: float, adoption: float) -> ScenarioVariant:
        effective_users = users * adoption
        requests = effective_users * per_user
        value = _productivity_value(params, requests, minutes * time_factor)
        cost = (
            _inference_cost(params, requests)
            + orchestration_cost
            + _governance_cost(params, requests, review_percent)
        )
        return ScenarioVariant(
            name=name,
            description=description,
            time_saved_factor=time_factor,
            adoption=adoption,
            effective_users=effective_users,
            monthly_value=value,
            monthly_cost=cost,
            net_monthly_gain=value - cost,
        )

    conservative = variant("Conservative", "Reduced adoption / lower time savings", 0.6, 0.7)
    optimistic = variant("Optimistic", "High adoption / higher efficiency", 1.3, 1.0)
    base = variant("Base Case", "Current model assumptions", 1.0, 1.0)
    # Base case carries the headline AI cost, which may come from another engine
    base = replace(base, monthly_cost=base_monthly_cost, net_monthly_gain=base.monthly_value - base_monthly_cost)
    return [conservative, base, optimistic]


def compute_sensitivity(
    params: RoiParameters,
    pillars: CostBreakdown,
    monthly_value: float,
    total_cost: float,
) -> SensitivityCallouts:
    """Break-even time saved, review-rate stress and reduced-adoption callouts."""
    minutes = non_negative(params.time_saved_per_request_minutes)
    requests = non_negative(params.user_count) * non_negative(params.requests_per_user_per_month)

    value_per_minute = safe_divide(monthly_value, minutes)
    break_even_minutes = safe_divide(total_cost, value_per_minute)

    review_percent = clamp_percent(params.percent_outputs_reviewed)
    if review_percent >= MINIMUM_TARGET_REVIEW_RATE:
        target_review_rate = min(100.0, float(round(review_percent * 1.5)))
    else:
        target_review_rate = float(MINIMUM_TARGET_REVIEW_RATE)
    cost_at_target = (
        pillars["inference"]
        + pillars["orchestration"]
        + _governance_cost(params, requests, target_review_rate)
    )

    reduced_cost = (
        pillars["inference"] * REDUCED_ADOPTION_FACTOR
        + pillars["orchestration"]
        + pillars["governance"] * REDUCED_ADOPTION_FACTOR
    )

    return SensitivityCallouts(
        break_even_minutes=break_even_minutes,
        target_review_rate=target_review_rate,
        total_cost_at_target_review=cost_at_target,
        users_at_60_percent=math.floor(non_negative(params.user_count) * REDUCED_ADOPTION_FACTOR),
        net_gain_at_60_percent=monthly_value * REDUCED_ADOPTION_FACTOR - reduced_cost,
    )


def compute_roi(params: RoiParameters, ai_monthly_cost: Optional[float] = None) -> RoiResult:
    """Compute monthly productivity value against AI operating cost.

    Args:
        params: ROI scenario inputs (raw values are normalized)
        ai_monthly_cost: Optional total monthly AI cost produced elsewhere
            (e.g. the active translation or RAG engine). When omitted, the
            sum of the three cost pillars is used.

    Returns:
        RoiResult with pillars, 12-month projection, scenario variants and
        sensitivity callouts
    """
    requests = non_negative(params.user_count) * non_negative(params.requests_per_user_per_month)
    minutes = non_negative(params.time_saved_per_request_minutes)

    pillars = compute_cost_pillars(params)
    total_cost = pillars.total if ai_monthly_cost is None else non_negative(ai_monthly_cost)
    monthly_value = _productivity_value(params, requests, minutes)

    logger.debug("ROI: value=%.2f cost=%.2f", monthly_value, total_cost)

    return RoiResult(
        monthly_requests=requests,
        hours_saved_monthly=(minutes * requests) / 60,
        pillars=pillars,
        total_ai_monthly_cost=total_cost,
        monthly_productivity_value=monthly_value,
        projection=project_linear(total_cost, monthly_value),
        scenarios=compute_scenarios(params, pillars["orchestration"], total_cost),
        sensitivity=compute_sensitivity(params, pillars, monthly_value, total_cost),
    )


def active_ai_monthly_cost(result: Union[TranslationResult, RagResult]) -> float:
    """Monthly AI operating cost of the active translation or RAG scenario."""
    if isinstance(result, TranslationResult):
        return result.monthly_total
    if isinstance(result, RagResult):
        return result.monthly_ops_total + result.monthly_governance_total
    raise TypeError(f"Unsupported scenario result: {type(result).__name__}")
