"""
Read-side projections over ticket snapshots
"""
from . import queries, stats
from .stats import DashboardSummary, StaffMetrics, TicketStatistics, summarize

__all__ = [
    "queries",
    "stats",
    "DashboardSummary",
    "StaffMetrics",
    "TicketStatistics",
    "summarize",
]
