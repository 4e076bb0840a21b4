"""Needs ranking and statistics computed from donation points."""

from .engine import (
    NeedEntry,
    StatisticsSummary,
    compute_needs_ranking,
    compute_statistics,
    normalise_items,
)

__all__ = [
    "NeedEntry",
    "StatisticsSummary",
    "compute_needs_ranking",
    "compute_statistics",
    "normalise_items",
]
