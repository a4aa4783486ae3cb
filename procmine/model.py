"""Core event log data model: attribute values, attributes, events, traces and logs."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Iterable, Mapping, Optional

ACTIVITY_NAME = "concept:name"
"""Common identifying attribute key for event identities (activities)."""

TRACE_PREFIX = "case:"
"""Prefix prepended to trace attribute keys when flattening a log to events."""

TRACE_ID_NAME = "concept:name"
"""Common identifying attribute key for trace identities."""

PREFIXED_TRACE_ID_NAME = "case:concept:name"
"""Combination of TRACE_PREFIX and TRACE_ID_NAME."""


class AttributeType(Enum):
    """Kinds of attribute values defined by the XES standard."""

    STRING = "String"
    DATE = "Date"
    INT = "Int"
    FLOAT = "Float"
    BOOLEAN = "Boolean"
    ID = "ID"
    LIST = "List"
    CONTAINER = "Container"
    NONE = "None"


_EXPECTED_CONTENT: dict[AttributeType, tuple[type, ...]] = {
    AttributeType.STRING: (str,),
    AttributeType.DATE: (datetime,),
    AttributeType.INT: (int,),
    AttributeType.FLOAT: (float, int),
    AttributeType.BOOLEAN: (bool,),
    AttributeType.ID: (uuid.UUID,),
    AttributeType.LIST: (list,),
    AttributeType.CONTAINER: (list,),
}


@dataclass
class AttributeValue:
    """A typed attribute value.

    ``content`` is ``None`` for values of type ``AttributeType.NONE``, which
    represent invalid values (such as dates that could not be parsed).
    """

    type: AttributeType
    content: Any = None

    def __post_init__(self) -> None:
        if self.type is AttributeType.NONE:
            self.content = None
            return
        expected = _EXPECTED_CONTENT[self.type]
        content = self.content
        bool_mismatch = isinstance(content, bool) and bool not in expected
        if not isinstance(content, expected) or bool_mismatch:
            raise TypeError(
                f"{self.type.value} attribute value cannot hold {type(content).__name__}"
            )
        if self.type is AttributeType.FLOAT:
            self.content = float(content)
        elif self.type is AttributeType.CONTAINER and not isinstance(content, Attributes):
            self.content = Attributes(content)

    def _content_if(self, kind: AttributeType) -> Any:
        return self.content if self.type is kind else None

    def try_as_string(self) -> Optional[str]:
        """Return the string if this is a string value, else None."""
        return self._content_if(AttributeType.STRING)

    def try_as_date(self) -> Optional[datetime]:
        """Return the datetime if this is a date value, else None."""
        return self._content_if(AttributeType.DATE)

    def try_as_int(self) -> Optional[int]:
        """Return the integer if this is an int value, else None."""
        return self._content_if(AttributeType.INT)

    def try_as_float(self) -> Optional[float]:
        """Return the float if this is a float value, else None."""
        return self._content_if(AttributeType.FLOAT)

    def try_as_bool(self) -> Optional[bool]:
        """Return the boolean if this is a boolean value, else None."""
        return self._content_if(AttributeType.BOOLEAN)

    def try_as_uuid(self) -> Optional[uuid.UUID]:
        """Return the UUID if this is an ID value, else None."""
        return self._content_if(AttributeType.ID)

    def try_as_list(self) -> Optional[list[Attribute]]:
        """Return the child attributes if this is a list value, else None."""
        return self._content_if(AttributeType.LIST)

    def try_as_container(self) -> Optional[Attributes]:
        """Return the child attributes if this is a container value, else None."""
        return self._content_if(AttributeType.CONTAINER)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible ``{"type": ..., "content": ...}`` mapping."""
        kind = self.type
        if kind is AttributeType.NONE:
            content: Any = []
        elif kind is AttributeType.DATE:
            content = self.content.isoformat()
        elif kind is AttributeType.ID:
            content = str(self.content)
        elif kind in (AttributeType.LIST, AttributeType.CONTAINER):
            content = [_attribute_to_dict(a) for a in self.content]
        else:
            content = self.content
        return {"type": kind.value, "content": content}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AttributeValue:
        """Build a value from the mapping produced by :meth:`to_dict`."""
        try:
            kind = AttributeType(data["type"])
        except KeyError as exc:
            raise ValueError("attribute value is missing its 'type'") from exc
        content = data.get("content")
        if kind is AttributeType.NONE:
            return cls(kind)
        if content is None:
            raise ValueError(f"{kind.value} attribute value is missing its 'content'")
        if kind is AttributeType.DATE:
            content = datetime.fromisoformat(content)
        elif kind is AttributeType.ID:
            content = uuid.UUID(content)
        elif kind is AttributeType.LIST:
            content = [_attribute_from_dict(a) for a in content]
        elif kind is AttributeType.CONTAINER:
            content = Attributes(_attribute_from_dict(a) for a in content)
        return cls(kind, content)


@dataclass
class Attribute:
    """An attribute made up of key, value and optional nested attributes."""

    key: str
    value: AttributeValue
    own_attributes: Optional[Attributes] = None


def _attribute_to_dict(attr: Attribute) -> dict[str, Any]:
    own = attr.own_attributes
    return {
        "key": attr.key,
        "value": attr.value.to_dict(),
        "own_attributes": None if own is None else [_attribute_to_dict(a) for a in own],
    }


def _attribute_from_dict(data: Mapping[str, Any]) -> Attribute:
    own = data.get("own_attributes")
    return Attribute(
        key=data["key"],
        value=AttributeValue.from_dict(data["value"]),
        own_attributes=None if own is None else Attributes(_attribute_from_dict(a) for a in own),
    )


class Attributes(list):
    """An ordered list of :class:`Attribute` objects with key-based helpers.

    Lookups are linear; keys are not required to be unique.
    """

    def add(self, key: str, value: AttributeValue) -> None:
        """Append a new attribute without checking for an existing key."""
        self.append(Attribute(key, value))

    def get_by_key(self, key: str) -> Optional[Attribute]:
        """Return the first attribute with ``key``, or None."""
        return next((a for a in self if a.key == key), None)

    def get_by_key_or_global(
        self, key: str, global_attrs: Optional[Iterable[Attribute]] = None
    ) -> Optional[Attribute]:
        """Return the attribute with ``key``, falling back to ``global_attrs``."""
        found = self.get_by_key(key)
        if found is not None:
            return found
        if global_attrs is not None:
            return next((a for a in global_attrs if a.key == key), None)
        return None

    def remove_with_key(self, key: str) -> bool:
        """Remove the first attribute with ``key``; return whether one was removed."""
        for index, attr in enumerate(self):
            if attr.key == key:
                del self[index]
                return True
        return False

    def as_dict(self) -> dict[str, Attribute]:
        """Map keys to attributes, stripping nested attributes.

        For duplicate keys the last attribute wins.
        """
        return {a.key: Attribute(a.key, a.value) for a in self}


def to_attributes(mapping: Mapping[str, AttributeValue]) -> Attributes:
    """Convert a key-to-value mapping into :class:`Attributes`."""
    return Attributes(Attribute(key, value) for key, value in mapping.items())


@dataclass
class Event:
    """An event consisting of event attributes."""

    attributes: Attributes = field(default_factory=Attributes)

    def __post_init__(self) -> None:
        if not isinstance(self.attributes, Attributes):
            self.attributes = Attributes(self.attributes)

    @classmethod
    def from_activity(cls, activity: str) -> Event:
        """Create an event whose only attribute is its activity name."""
        return cls(to_attributes({ACTIVITY_NAME: AttributeValue(AttributeType.STRING, activity)}))


@dataclass
class Trace:
    """A trace: trace attributes and a list of events."""

    attributes: Attributes = field(default_factory=Attributes)
    events: list[Event] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.attributes, Attributes):
            self.attributes = Attributes(self.attributes)


@dataclass(frozen=True)
class EventLogExtension:
    """An XES extension declaration."""

    name: str
    prefix: str
    uri: str


@dataclass
class EventLogClassifier:
    """Classifies events by the values of a set of attribute keys."""

    DELIMITER: ClassVar[str] = "+"

    name: str = "Default"
    keys: list[str] = field(default_factory=lambda: [ACTIVITY_NAME])

    def class_identity(
        self, event: Event, global_attrs: Optional[Iterable[Attribute]] = None
    ) -> str:
        """Join the classifier's attribute values with :attr:`DELIMITER`.

        Missing attributes and non-string values contribute an empty string.
        """
        globals_list = None if global_attrs is None else list(global_attrs)
        parts = []
        for key in self.keys:
            attr = event.attributes.get_by_key_or_global(key, globals_list)
            text = attr.value.try_as_string() if attr is not None else None
            parts.append(text if text is not None else "")
        return self.DELIMITER.join(parts)


@dataclass
class EventLog:
    """An event log: log attributes, traces and optional XES metadata."""

    attributes: Attributes = field(default_factory=Attributes)
    traces: list[Trace] = field(default_factory=list)
    extensions: Optional[list[EventLogExtension]] = None
    classifiers: Optional[list[EventLogClassifier]] = None
    global_trace_attrs: Optional[Attributes] = None
    global_event_attrs: Optional[Attributes] = None

    def __post_init__(self) -> None:
        if not isinstance(self.attributes, Attributes):
            self.attributes = Attributes(self.attributes)

    def get_classifier_by_name(self, name: str) -> Optional[EventLogClassifier]:
        """Return a copy of the classifier called ``name``, or None."""
        for classifier in self.classifiers or ():
            if classifier.name == name:
                return EventLogClassifier(classifier.name, list(classifier.keys))
        return None

    def get_trace_attribute(self, trace: Trace, key: str) -> Optional[Attribute]:
        """Look up a trace attribute, falling back to global trace attributes."""
        return trace.attributes.get_by_key_or_global(key, self.global_trace_attrs)

    def get_event_attribute(self, event: Event, key: str) -> Optional[Attribute]:
        """Look up an event attribute, falling back to the log's global trace attributes."""
        return event.attributes.get_by_key_or_global(key, self.global_trace_attrs)