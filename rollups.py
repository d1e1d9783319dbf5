# rollups.py
"""
All-time totals and record days.

Ties go to the first summary in input order: a later day must strictly beat
the current record to replace it.
"""
from typing import Iterable

from schema_defs import DailySummary


def all_time_totals(summaries: Iterable[DailySummary]) -> dict:
    total_cycles = 0
    total_gallons = 0.0
    for s in summaries:
        total_cycles += int(s.total_cycles or 0)
        total_gallons += float(s.total_gallons or 0.0)
    return {"total_cycles": total_cycles, "total_gallons": total_gallons}


def _first_max(summaries: Iterable[DailySummary], key) -> DailySummary | None:
    best = None
    best_val = None
    for s in summaries:
        val = key(s)
        if best is None or val > best_val:
            best, best_val = s, val
    return best


def busiest_day(summaries: Iterable[DailySummary]) -> DailySummary | None:
    """Day with the most gallons pumped."""
    return _first_max(summaries, lambda s: float(s.total_gallons or 0.0))


def most_cycles_day(summaries: Iterable[DailySummary]) -> DailySummary | None:
    return _first_max(summaries, lambda s: int(s.total_cycles or 0))


def compute_records(summaries: Iterable[DailySummary]) -> dict:
    """Totals plus both record days, from one pass over materialised input."""
    history = list(summaries)
    return {
        **all_time_totals(history),
        "busiest_day": busiest_day(history),
        "most_cycles_day": most_cycles_day(history),
    }
