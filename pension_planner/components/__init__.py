"""Expose component submodules for convenience."""

from .charts import fan_chart, projection_chart, strategy_heatmap, success_gauge
from .insights import monte_carlo_insight, optimization_insight, projection_insight

__all__ = [
    "projection_chart",
    "fan_chart",
    "success_gauge",
    "strategy_heatmap",
    "projection_insight",
    "optimization_insight",
    "monte_carlo_insight",
]
