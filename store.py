# store.py
"""
Read contract between the engine and the telemetry store.

The engine only ever reads; the store owns persistence and the upserting of
daily summaries. `InMemoryStore` serves immutable snapshots (CSV exports,
tests, the regression runner).
"""
from abc import ABC, abstractmethod
from typing import Iterable

from schema_defs import DailySummary, EnvSample, Event, Reading
from utils import as_date, to_utc


class TelemetryStore(ABC):

    @abstractmethod
    def get_latest_reading(self) -> Reading | None:
        ...

    @abstractmethod
    def get_readings(self, since=None) -> list[Reading]:
        """Readings at or after `since`, oldest first."""

    @abstractmethod
    def get_daily_summaries(self, start=None, end=None) -> list[DailySummary]:
        """Summaries in the inclusive date range, oldest first. Sparse."""

    @abstractmethod
    def get_events(
        self,
        types: Iterable[str] | None = None,
        since=None,
        limit: int | None = None,
        newest_first: bool = True,
    ) -> list[Event]:
        ...

    def get_env_samples(self, since=None) -> list[EnvSample]:
        return []


class InMemoryStore(TelemetryStore):

    def __init__(
        self,
        readings: Iterable[Reading] = (),
        events: Iterable[Event] = (),
        summaries: Iterable[DailySummary] = (),
        env_samples: Iterable[EnvSample] = (),
    ):
        # Stable sorts keep insertion order for equal timestamps
        self._readings = tuple(sorted(readings, key=lambda r: to_utc(r.timestamp)))
        self._events = tuple(sorted(events, key=lambda e: to_utc(e.timestamp)))
        self._summaries = tuple(sorted(summaries, key=lambda s: as_date(s.date)))
        self._env = tuple(sorted(env_samples, key=lambda s: to_utc(s.timestamp)))

    def __repr__(self):
        return (
            f"InMemoryStore(readings={len(self._readings)}, events={len(self._events)}, "
            f"summaries={len(self._summaries)}, env_samples={len(self._env)})"
        )

    def get_latest_reading(self) -> Reading | None:
        return self._readings[-1] if self._readings else None

    def get_readings(self, since=None) -> list[Reading]:
        if since is None:
            return list(self._readings)
        cutoff = to_utc(since)
        return [r for r in self._readings if to_utc(r.timestamp) >= cutoff]

    def get_daily_summaries(self, start=None, end=None) -> list[DailySummary]:
        lo = as_date(start) if start is not None else None
        hi = as_date(end) if end is not None else None
        out = []
        for s in self._summaries:
            d = as_date(s.date)
            if lo is not None and d < lo:
                continue
            if hi is not None and d > hi:
                continue
            out.append(s)
        return out

    def get_events(
        self,
        types: Iterable[str] | None = None,
        since=None,
        limit: int | None = None,
        newest_first: bool = True,
    ) -> list[Event]:
        wanted = set(types) if types is not None else None
        cutoff = to_utc(since) if since is not None else None

        out = [
            e for e in self._events
            if (wanted is None or e.event_type in wanted)
            and (cutoff is None or to_utc(e.timestamp) >= cutoff)
        ]
        if newest_first:
            out.reverse()
        if limit is not None:
            out = out[:max(limit, 0)]
        return out

    def get_env_samples(self, since=None) -> list[EnvSample]:
        if since is None:
            return list(self._env)
        cutoff = to_utc(since)
        return [s for s in self._env if to_utc(s.timestamp) >= cutoff]
