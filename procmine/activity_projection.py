"""Projection of event logs onto activity labels and the weighted DFG built from it."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from itertools import pairwise
from typing import Iterable, Iterator

from .model import ACTIVITY_NAME, Event, EventLog, Trace

START_ACTIVITY = "__START"
"""Artificial activity that can be added to mark the start of traces."""

END_ACTIVITY = "__END"
"""Artificial activity that can be added to mark the end of traces."""

NO_ACTIVITY = "No Activity"

_log = logging.getLogger(__name__)


def _activity_of(event: Event) -> str:
    attr = event.attributes.get_by_key(ACTIVITY_NAME)
    if attr is None:
        return NO_ACTIVITY
    name = attr.value.try_as_string()
    return name if name is not None else NO_ACTIVITY


@dataclass
class EventLogActivityProjection:
    """An event log reduced to activity indices.

    ``activities[i]`` is the name of activity ``i`` and ``act_to_index`` is the
    reverse mapping. Each entry of ``traces`` is a variant (a list of activity
    indices) together with the number of traces following it.
    """

    activities: list[str] = field(default_factory=list)
    act_to_index: dict[str, int] = field(default_factory=dict)
    traces: list[tuple[list[int], int]] = field(default_factory=list)

    @classmethod
    def from_traces(cls, traces: Iterable[Trace]) -> EventLogActivityProjection:
        """Project a stream of traces; activities are numbered in order of appearance."""
        projection = cls()
        variants: Counter[tuple[int, ...]] = Counter()
        for trace in traces:
            variant = []
            for event in trace.events:
                name = _activity_of(event)
                index = projection.act_to_index.get(name)
                if index is None:
                    index = len(projection.activities)
                    projection.activities.append(name)
                    projection.act_to_index[name] = index
                variant.append(index)
            variants[tuple(variant)] += 1
        projection.traces = [(list(variant), count) for variant, count in variants.items()]
        return projection

    @classmethod
    def from_event_log(cls, log: EventLog) -> EventLogActivityProjection:
        """Project all traces of an event log."""
        return cls.from_traces(log.traces)

    def acts_to_names(self, acts: Iterable[int]) -> list[str]:
        """Return the sorted names of the given activity indices."""
        return sorted(self.activities[act] for act in acts)

    def copy(self) -> EventLogActivityProjection:
        """Return an independent copy."""
        return EventLogActivityProjection(
            list(self.activities),
            dict(self.act_to_index),
            [(list(variant), count) for variant, count in self.traces],
        )


@dataclass
class ActivityProjectionDFG:
    """Weighted directly-follows graph over activity indices."""

    nodes: list[int] = field(default_factory=list)
    edges: dict[tuple[int, int], int] = field(default_factory=dict)

    def df_between(self, a: int, b: int) -> int:
        """Weight of the directly-follows relation from ``a`` to ``b`` (0 if absent)."""
        return self.edges.get((a, b), 0)

    def df_preset_of(self, act: int, df_threshold: int) -> set[int]:
        """Activities directly preceding ``act`` with weight at least ``df_threshold``."""
        return {a for (a, b), w in self.edges.items() if b == act and w >= df_threshold}

    def df_postset_of(self, act: int, df_threshold: int) -> Iterator[int]:
        """Yield activities directly following ``act`` with weight at least ``df_threshold``."""
        return (b for (a, b), w in self.edges.items() if a == act and w >= df_threshold)

    @classmethod
    def from_event_log_projection(cls, log: EventLogActivityProjection) -> ActivityProjectionDFG:
        """Build the weighted DFG of a projection.

        Raises ValueError if the projection holds no traces.
        """
        if not log.traces:
            raise ValueError("cannot build a DFG from a projection without traces")
        edges: Counter[tuple[int, int]] = Counter()
        for variant, weight in log.traces:
            for pair in pairwise(variant):
                edges[pair] += weight
        return cls(list(range(len(log.activities))), dict(edges))


def _ensure_activity(log: EventLogActivityProjection, name: str) -> tuple[int, bool]:
    index = log.act_to_index.get(name)
    if index is not None:
        return index, False
    index = len(log.activities)
    log.activities.append(name)
    log.act_to_index[name] = index
    return index, True


def add_start_end_acts_proj(log: EventLogActivityProjection) -> None:
    """Add artificial start and end activities to every variant, in place.

    An artificial activity already present in the activity set is not added again.
    """
    start_act, add_start = _ensure_activity(log, START_ACTIVITY)
    if not add_start:
        _log.warning(
            "Start activity (%s) already present in activity set; "
            "not adding a start activity to traces.",
            START_ACTIVITY,
        )
    end_act, add_end = _ensure_activity(log, END_ACTIVITY)
    if not add_end:
        _log.warning(
            "End activity (%s) already present in activity set; "
            "not adding an end activity to traces.",
            END_ACTIVITY,
        )
    for variant, _ in log.traces:
        if add_start:
            variant.insert(0, start_act)
        if add_end:
            variant.append(end_act)


def add_start_end_acts(log: EventLog) -> None:
    """Add artificial start and end events to every trace, in place.

    Does not check whether the artificial activities are already present.
    """
    for trace in log.traces:
        trace.events.insert(0, Event.from_activity(START_ACTIVITY))
        trace.events.append(Event.from_activity(END_ACTIVITY))