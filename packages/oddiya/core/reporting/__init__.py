"""Plan reporting and diagnostics."""

from oddiya.core.reporting.plan_summary import (
    PlanSummary,
    ReportFlag,
    ReportFlagLevel,
    summarize_plan,
)

__all__ = [
    "PlanSummary",
    "ReportFlag",
    "ReportFlagLevel",
    "summarize_plan",
]
