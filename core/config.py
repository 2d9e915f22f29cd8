"""
Projection configuration.
Thresholds and safety bounds shared by the engine and the reports.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProjectionConfig:
    # payoff simulation stops here (30 years) for non-amortizing payments
    payoff_max_months: int = 360

    # edits to instances older than this many whole months need confirmation
    stale_edit_months: int = 3

    # used when the stored document has no usable threshold
    default_warning_threshold: float = 500.0
    default_floor_threshold: float = 50.0

    # outlook horizons, in months
    horizons: tuple = (
        ("6m", 6),
        ("1y", 12),
        ("2y", 24),
        ("5y", 60),
        ("10y", 120),
        ("15y", 180),
    )

    def horizon_months(self, label: str) -> int:
        """Months covered by a horizon label; unknown labels mean one year."""
        return dict(self.horizons).get(label, 12)


DEFAULT_CONFIG = ProjectionConfig()
