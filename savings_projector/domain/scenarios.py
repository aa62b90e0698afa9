from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict

from savings_projector.core.projection import ScenarioInput, ScenarioResult, project
from savings_projector.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PALETTE_SIZE = 5


class ScenarioIndexOutOfRange(IndexError):
    def __init__(self, ordinal: int, size: int):
        super().__init__(f"no scenario at ordinal {ordinal} (set holds {size})")
        self.ordinal = ordinal
        self.size = size


class ScenarioStore(Protocol):
    """Persistence collaborator: whatever keeps the input list between runs."""

    def load(self) -> List[ScenarioInput]: ...

    def save(self, inputs: List[ScenarioInput]) -> None: ...


class Scenario(BaseModel):
    model_config = ConfigDict(frozen=True)

    input: ScenarioInput
    result: ScenarioResult
    ordinal: int

    @property
    def label(self) -> str:
        return f"Pattern {self.ordinal + 1}"


class NamedSeries(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    points: List[int]
    color_index: int


class ChartSeries(BaseModel):
    model_config = ConfigDict(frozen=True)

    series: List[NamedSeries]
    max_months: int


@dataclass
class _Entry:
    input: ScenarioInput
    result: ScenarioResult


@dataclass
class ScenarioSet:
    """
    Ordered, insertion-ordered collection of projected scenarios.

    Ordinals are positions, so they stay contiguous from 0 after every
    mutation. Mutations save through ``store`` (when given) and then tell
    subscribers that derived views (list, chart, headline) are stale.
    """

    store: Optional[ScenarioStore] = None
    palette_size: int = DEFAULT_PALETTE_SIZE
    _entries: List[_Entry] = field(default_factory=list, init=False, repr=False)
    _subscribers: List[Callable[["ScenarioSet"], None]] = field(
        default_factory=list, init=False, repr=False
    )
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ---------- mutations ----------

    def add(self, scenario_input: ScenarioInput) -> Scenario:
        result = project(scenario_input)
        with self._lock:
            entries = self._entries + [_Entry(input=scenario_input, result=result)]
            self._persist(entries)
            self._entries = entries
            ordinal = len(entries) - 1
        logger.info("scenario_added", ordinal=ordinal, final_balance=result.final_balance)
        self._notify()
        return Scenario(input=scenario_input, result=result, ordinal=ordinal)

    def remove(self, ordinal: int) -> Scenario:
        with self._lock:
            if not 0 <= ordinal < len(self._entries):
                raise ScenarioIndexOutOfRange(ordinal, len(self._entries))
            entry = self._entries[ordinal]
            entries = self._entries[:ordinal] + self._entries[ordinal + 1 :]
            self._persist(entries)
            self._entries = entries
            remaining = len(entries)
        logger.info("scenario_removed", ordinal=ordinal, remaining=remaining)
        self._notify()
        return Scenario(input=entry.input, result=entry.result, ordinal=ordinal)

    def restore(self, inputs: Iterable[ScenarioInput]) -> None:
        """Replace the set with fresh projections of ``inputs``; does not save."""
        entries = [_Entry(input=item, result=project(item)) for item in inputs]
        with self._lock:
            self._entries = entries
        logger.info("scenarios_restored", count=len(entries))
        self._notify()

    def hydrate(self) -> None:
        if self.store is None:
            return
        self.restore(self.store.load())

    # ---------- views ----------

    def list(self) -> List[Scenario]:
        with self._lock:
            return [
                Scenario(input=entry.input, result=entry.result, ordinal=ordinal)
                for ordinal, entry in enumerate(self._entries)
            ]

    def headline(self) -> Optional[Scenario]:
        """Scenario shown in the single-result summary: always ordinal 0."""
        with self._lock:
            if not self._entries:
                return None
            entry = self._entries[0]
            return Scenario(input=entry.input, result=entry.result, ordinal=0)

    def serialize(self) -> List[ScenarioInput]:
        with self._lock:
            return [entry.input for entry in self._entries]

    def derive_chart_series(self) -> ChartSeries:
        scenarios = self.list()
        series = [
            NamedSeries(
                label=scenario.label,
                points=list(scenario.result.monthly_balances),
                color_index=scenario.ordinal % self.palette_size,
            )
            for scenario in scenarios
        ]
        max_months = max((s.input.horizon_months for s in scenarios), default=0)
        return ChartSeries(series=series, max_months=max_months)

    # ---------- change tracking ----------

    def subscribe(self, callback: Callable[["ScenarioSet"], None]) -> None:
        self._subscribers.append(callback)

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self)

    def _persist(self, entries: List[_Entry]) -> None:
        # runs before the new list is committed, so a failed save leaves the set as it was
        if self.store is None:
            return
        self.store.save([entry.input for entry in entries])


__all__ = [
    "DEFAULT_PALETTE_SIZE",
    "ScenarioIndexOutOfRange",
    "ScenarioStore",
    "Scenario",
    "NamedSeries",
    "ChartSeries",
    "ScenarioSet",
]
