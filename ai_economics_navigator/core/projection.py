"""
Cost breakdowns and 12-month cumulative projections.

Shared value types for the three engines. Two projection shapes exist:

1. Setup-first - a one-time cost is paid in month 1 and recurring cost
   accrues for each elapsed month after it (translation, RAG).
2. Linear - every month contributes the same increment from month 1 (ROI).
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping

PROJECTION_MONTHS = 12


@dataclass(frozen=True)
class CostBreakdown:
    """Named cost components that sum to a phase total."""
    components: Dict[str, float]

    def __post_init__(self):
        """Validate components are non-negative."""
        for name, amount in self.components.items():
            if amount < 0:
                raise ValueError(f"cost component '{name}' cannot be negative")

    @property
    def total(self) -> float:
        return sum(self.components.values())

    def __getitem__(self, name: str) -> float:
        return self.components[name]

    def to_dict(self) -> Dict[str, float]:
        return dict(self.components)


@dataclass(frozen=True)
class ProjectionPoint:
    """Cumulative position at the end of one projected month."""
    period_label: str
    cumulative_cost: float
    cumulative_value: float = 0.0
    cumulative_net_gain: float = 0.0
    breakdown: Mapping[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "period": self.period_label,
            "cost": self.cumulative_cost,
            "value": self.cumulative_value,
            "net_gain": self.cumulative_net_gain,
            **{f"cost_{name}": amount for name, amount in self.breakdown.items()},
        }


def month_label(index: int) -> str:
    """Label for the 0-based month index."""
    return f"Month {index + 1}"


def project_setup_then_recurring(
    setup: Mapping[str, float],
    monthly: Mapping[str, float],
) -> List[ProjectionPoint]:
    """Project cumulative cost with setup paid in month 1.

    Month ``i`` (0-based) holds ``setup + monthly * i`` per component, so the
    first point equals the setup cost with no recurring months elapsed.

    Args:
        setup: One-time cost per component
        monthly: Recurring monthly cost per component (same keys as setup)

    Returns:
        Exactly 12 projection points
    """
    if set(setup) != set(monthly):
        raise ValueError("setup and monthly components must match")

    points = []
    for i in range(PROJECTION_MONTHS):
        breakdown = {name: setup[name] + monthly[name] * i for name in setup}
        cost = sum(breakdown.values())
        points.append(ProjectionPoint(
            period_label=month_label(i),
            cumulative_cost=cost,
            cumulative_value=0.0,
            cumulative_net_gain=-cost,
            breakdown=breakdown,
        ))
    return points


def project_linear(monthly_cost: float, monthly_value: float) -> List[ProjectionPoint]:
    """Project cumulative cost and value growing linearly from month 1."""
    points = []
    for i in range(PROJECTION_MONTHS):
        months = i + 1
        cost = monthly_cost * months
        value = monthly_value * months
        points.append(ProjectionPoint(
            period_label=month_label(i),
            cumulative_cost=cost,
            cumulative_value=value,
            cumulative_net_gain=value - cost,
        ))
    return points
