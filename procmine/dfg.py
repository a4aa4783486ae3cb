"""Directly-follows graphs over activity names, annotated with frequencies."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Optional

from .model import EventLog, EventLogClassifier

Relation = tuple[str, str]
"""A directly-follows relation: source activity and target activity."""


@dataclass
class DirectlyFollowsGraph:
    """A directly-follows graph.

    Holds activities with their frequencies, directly-follows relations with
    their frequencies, and the sets of start and end activities.
    """

    activities: dict[str, int] = field(default_factory=dict)
    directly_follows_relations: dict[Relation, int] = field(default_factory=dict)
    start_activities: set[str] = field(default_factory=set)
    end_activities: set[str] = field(default_factory=set)

    @classmethod
    def create_from_log(
        cls, event_log: EventLog, classifier: Optional[EventLogClassifier] = None
    ) -> DirectlyFollowsGraph:
        """Build a graph from a log, naming activities with ``classifier``.

        Without a classifier the default one (on the activity name) is used.
        """
        classifier = classifier if classifier is not None else EventLogClassifier()
        activities: Counter[str] = Counter()
        relations: Counter[Relation] = Counter()
        graph = cls()
        for trace in event_log.traces:
            identities = [classifier.class_identity(event) for event in trace.events]
            if not identities:
                continue
            activities.update(identities)
            relations.update(zip(identities, identities[1:]))
            graph.start_activities.add(identities[0])
            graph.end_activities.add(identities[-1])
        for activity, frequency in activities.items():
            graph.add_activity(activity, frequency)
        for (source, target), frequency in relations.items():
            graph.add_df_relation(source, target, frequency)
        return graph

    def to_json(self) -> str:
        """Serialize to a JSON string; relations are written as ``[[from, to], freq]`` pairs."""
        data: dict[str, Any] = {
            "activities": dict(self.activities),
            "directly_follows_relations": [
                [[source, target], frequency]
                for (source, target), frequency in self.directly_follows_relations.items()
            ],
            "start_activities": sorted(self.start_activities),
            "end_activities": sorted(self.end_activities),
        }
        return json.dumps(data)

    @classmethod
    def from_json(cls, text: str) -> DirectlyFollowsGraph:
        """Parse a graph from the JSON form written by :meth:`to_json`.

        Raises ValueError on malformed input.
        """
        try:
            data = json.loads(text)
            activities = {str(k): int(v) for k, v in data["activities"].items()}
            relations: dict[Relation, int] = {}
            for (source, target), frequency in data["directly_follows_relations"]:
                relations[(str(source), str(target))] = int(frequency)
            starts = {str(a) for a in data["start_activities"]}
            ends = {str(a) for a in data["end_activities"]}
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"malformed directly-follows graph JSON: {exc}") from exc
        return cls(activities, relations, starts, ends)

    def add_activity(self, activity: str, frequency: int) -> None:
        """Add an activity, adding ``frequency`` to its count if already present."""
        self.activities[activity] = self.activities.get(activity, 0) + frequency

    def add_start_activity(self, activity: str) -> None:
        """Mark ``activity`` as a start activity."""
        self.start_activities.add(activity)

    def add_end_activity(self, activity: str) -> None:
        """Mark ``activity`` as an end activity."""
        self.end_activities.add(activity)

    def contains_activity(self, activity: str) -> bool:
        """Whether ``activity`` is in the graph."""
        return activity in self.activities

    def is_start_activity(self, activity: str) -> bool:
        """Whether ``activity`` is a start activity."""
        return activity in self.start_activities

    def is_end_activity(self, activity: str) -> bool:
        """Whether ``activity`` is an end activity."""
        return activity in self.end_activities

    def remove_activity(self, activity: str) -> None:
        """Remove an activity together with its start/end marks and relations."""
        if self.activities.pop(activity, None) is None:
            return
        self.start_activities.discard(activity)
        self.end_activities.discard(activity)
        self.directly_follows_relations = {
            rel: freq
            for rel, freq in self.directly_follows_relations.items()
            if activity not in rel
        }

    def add_df_relation(self, source: str, target: str, frequency: int) -> None:
        """Add a relation, adding ``frequency`` to its count if already present."""
        key = (source, target)
        self.directly_follows_relations[key] = (
            self.directly_follows_relations.get(key, 0) + frequency
        )

    def contains_df_relation(self, relation: Relation) -> bool:
        """Whether the ``(source, target)`` relation is in the graph."""
        source, target = relation
        return (source, target) in self.directly_follows_relations

    def ingoing_activities(self, activity: str) -> set[str]:
        """Activities with a relation into ``activity``."""
        return {x for x, y in self.directly_follows_relations if y == activity}

    def outgoing_activities(self, activity: str) -> set[str]:
        """Activities with a relation from ``activity``."""
        return {y for x, y in self.directly_follows_relations if x == activity}

    def get_ingoing_df_relations(self, activity: str) -> set[Relation]:
        """Relations ending at ``activity``."""
        return {rel for rel in self.directly_follows_relations if rel[1] == activity}

    def get_outgoing_df_relations(self, activity: str) -> set[Relation]:
        """Relations starting at ``activity``."""
        return {rel for rel in self.directly_follows_relations if rel[0] == activity}