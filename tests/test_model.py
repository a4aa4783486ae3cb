import uuid
from datetime import datetime, timedelta, timezone

import pytest

from procmine.model import (
    ACTIVITY_NAME,
    Attribute,
    Attributes,
    AttributeType,
    AttributeValue,
    Event,
    EventLog,
    EventLogClassifier,
    EventLogExtension,
    Trace,
    to_attributes,
)


def s(text):
    return AttributeValue(AttributeType.STRING, text)


def test_float_value_access():
    v = AttributeValue(AttributeType.FLOAT, 42.0)
    assert v.try_as_float() == 42.0
    assert v.try_as_int() is None
    assert v.try_as_string() is None


def test_try_as_each_type():
    when = datetime(2023, 5, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))
    ident = uuid.uuid4()
    assert AttributeValue(AttributeType.DATE, when).try_as_date() == when
    assert AttributeValue(AttributeType.INT, 7).try_as_int() == 7
    assert AttributeValue(AttributeType.BOOLEAN, True).try_as_bool() is True
    assert AttributeValue(AttributeType.ID, ident).try_as_uuid() == ident
    children = [Attribute("x", s("y"))]
    assert AttributeValue(AttributeType.LIST, children).try_as_list() == children
    cont = AttributeValue(AttributeType.CONTAINER, children).try_as_container()
    assert isinstance(cont, Attributes) and cont.get_by_key("x").value == s("y")
    assert s("a").try_as_bool() is None


def test_mismatched_content_raises():
    with pytest.raises(TypeError):
        AttributeValue(AttributeType.INT, "nope")
    with pytest.raises(TypeError):
        AttributeValue(AttributeType.INT, True)


def test_string_to_dict_shape():
    assert s("abc").to_dict() == {"type": "String", "content": "abc"}


@pytest.mark.parametrize(
    "value",
    [
        s("hello"),
        AttributeValue(AttributeType.INT, -3),
        AttributeValue(AttributeType.FLOAT, 1.5),
        AttributeValue(AttributeType.BOOLEAN, False),
        AttributeValue(AttributeType.ID, uuid.uuid4()),
        AttributeValue(AttributeType.DATE, datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)),
        AttributeValue(AttributeType.NONE),
        AttributeValue(AttributeType.LIST, [Attribute("a", s("b")), Attribute("a", s("c"))]),
        AttributeValue(
            AttributeType.CONTAINER,
            [Attribute("k", AttributeValue(AttributeType.INT, 1), Attributes([Attribute("n", s("m"))]))],
        ),
    ],
)
def test_value_round_trip(value):
    assert AttributeValue.from_dict(value.to_dict()) == value


def test_from_dict_unknown_type():
    with pytest.raises(ValueError):
        AttributeValue.from_dict({"type": "Weird", "content": 1})


def test_from_dict_missing_type():
    with pytest.raises(ValueError):
        AttributeValue.from_dict({"content": 1})


def test_attributes_add_and_get():
    attrs = Attributes()
    attrs.add("key", AttributeValue(AttributeType.FLOAT, 42.0))
    found = attrs.get_by_key("key")
    assert found.value.try_as_float() == 42.0
    assert attrs.get_by_key("missing") is None


def test_get_by_key_or_global():
    attrs = Attributes([Attribute("a", s("local"))])
    globals_ = Attributes([Attribute("a", s("global")), Attribute("b", s("gb"))])
    assert attrs.get_by_key_or_global("a", globals_).value == s("local")
    assert attrs.get_by_key_or_global("b", globals_).value == s("gb")
    assert attrs.get_by_key_or_global("b", None) is None


def test_remove_with_key():
    attrs = Attributes([Attribute("a", s("1")), Attribute("a", s("2"))])
    assert attrs.remove_with_key("a") is True
    assert [a.value for a in attrs] == [s("2")]
    assert attrs.remove_with_key("zzz") is False
    assert len(attrs) == 1


def test_as_dict_strips_nested():
    nested = Attributes([Attribute("n", s("m"))])
    attrs = Attributes([Attribute("a", s("x"), nested)])
    mapped = attrs.as_dict()
    assert set(mapped) == {"a"}
    assert mapped["a"].own_attributes is None
    assert mapped["a"].value == s("x")


def test_to_attributes():
    attrs = to_attributes({"a": s("1"), "b": s("2")})
    assert isinstance(attrs, Attributes)
    assert attrs.get_by_key("b").value == s("2")
    assert len(attrs) == 2


def test_event_from_activity():
    ev = Event.from_activity("Work")
    assert len(ev.attributes) == 1
    assert ev.attributes.get_by_key(ACTIVITY_NAME).value.try_as_string() == "Work"


def test_default_classifier():
    c = EventLogClassifier()
    assert c.name == "Default"
    assert c.keys == [ACTIVITY_NAME]
    assert c.class_identity(Event.from_activity("Cook")) == "Cook"


def test_classifier_joins_and_handles_missing():
    c = EventLogClassifier("multi", ["x", "y", "z"])
    ev = Event(Attributes([Attribute("x", s("a")), Attribute("z", AttributeValue(AttributeType.INT, 1))]))
    result = c.class_identity(ev)
    assert result.split(EventLogClassifier.DELIMITER) == ["a", "", ""]


def test_classifier_uses_globals():
    c = EventLogClassifier("g", ["x", "y"])
    ev = Event(Attributes([Attribute("x", s("a"))]))
    globals_ = [Attribute("y", s("b"))]
    assert c.class_identity(ev, globals_) == "a" + EventLogClassifier.DELIMITER + "b"


def test_get_classifier_by_name_returns_copy():
    original = EventLogClassifier("Activity", [ACTIVITY_NAME])
    log = EventLog(classifiers=[original])
    got = log.get_classifier_by_name("Activity")
    assert got == original
    got.keys.append("other")
    assert original.keys == [ACTIVITY_NAME]
    assert log.get_classifier_by_name("missing") is None
    assert EventLog().get_classifier_by_name("Activity") is None


def test_trace_and_event_attribute_lookup():
    log = EventLog(global_trace_attrs=Attributes([Attribute("g", s("gv"))]))
    trace = Trace(Attributes([Attribute("t", s("tv"))]), [Event.from_activity("A")])
    assert log.get_trace_attribute(trace, "t").value == s("tv")
    assert log.get_trace_attribute(trace, "g").value == s("gv")
    ev = trace.events[0]
    assert log.get_event_attribute(ev, ACTIVITY_NAME).value == s("A")
    assert log.get_event_attribute(ev, "g").value == s("gv")
    assert log.get_event_attribute(ev, "nothing") is None


def test_extension_is_hashable():
    ext = EventLogExtension("Concept", "concept", "urn:concept")
    assert {ext, EventLogExtension("Concept", "concept", "urn:concept")} == {ext}