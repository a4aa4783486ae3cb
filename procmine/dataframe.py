"""Conversion between event logs and flat pandas data frames (one row per event)."""

from __future__ import annotations

import math
import numbers
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pandas as pd

from .model import (
    PREFIXED_TRACE_ID_NAME,
    TRACE_PREFIX,
    Attribute,
    Attributes,
    AttributeType,
    AttributeValue,
    Event,
    EventLog,
    Trace,
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_DTYPES: dict[str, Any] = {
    "int": "Int64",
    "float": "float64",
    "bool": "boolean",
    "str": object,
    "datetime": "datetime64[ns]",
}


def _value_to_cell(value: AttributeValue) -> Any:
    kind = value.type
    if kind is AttributeType.NONE:
        return None
    if kind is AttributeType.DATE:
        stamp = pd.Timestamp(value.content)
        if stamp.tzinfo is not None:
            stamp = stamp.tz_convert("UTC").tz_localize(None)
        return stamp
    if kind is AttributeType.ID:
        return str(value.content)
    if kind in (AttributeType.LIST, AttributeType.CONTAINER):
        return repr(list(value.content))
    return value.content


def _attribute_to_cell(attr: Optional[Attribute]) -> Any:
    return None if attr is None else _value_to_cell(attr.value)


def _cell_kind(cell: Any) -> Optional[str]:
    if cell is None:
        return None
    if isinstance(cell, bool):
        return "bool"
    if isinstance(cell, int):
        return "int"
    if isinstance(cell, float):
        return "float"
    if isinstance(cell, str):
        return "str"
    return "datetime"


def _column(key: str, cells: list[Any]) -> pd.Series:
    kinds = {_cell_kind(c) for c in cells}
    kinds.discard(None)
    if len(kinds) > 1:
        print(f"Warning: Attribute {key} contains values of different dtypes ({sorted(kinds)})")
        if kinds == {"int", "float"}:
            return pd.Series(
                [None if c is None else float(c) for c in cells], dtype="float64", name=key
            )
        return pd.Series(
            [c if c is None or isinstance(c, str) else str(c) for c in cells],
            dtype=object,
            name=key,
        )
    if not kinds:
        return pd.Series(cells, dtype=object, name=key)
    return pd.Series(cells, dtype=_DTYPES[kinds.pop()], name=key)


def convert_log_to_dataframe(log: EventLog, print_debug: bool = False) -> pd.DataFrame:
    """Flatten an event log into a data frame with one row per event.

    Trace attributes become columns prefixed with ``case:`` and are repeated on
    every event of the trace. Columns holding integers and floats become float
    columns; other mixed columns are converted to strings. Columns are sorted.
    """
    if print_debug:
        print("Starting converting log to DataFrame")
    started = time.perf_counter()
    keys: set[str] = set()
    for trace in log.traces:
        keys.update(TRACE_PREFIX + a.key for a in trace.attributes)
        for event in trace.events:
            keys.update(a.key for a in event.attributes)
    if print_debug:
        print(f"Gathering all attributes took {time.perf_counter() - started:.2f}s")

    started = time.perf_counter()
    columns: dict[str, pd.Series] = {}
    for key in sorted(keys):
        cells: list[Any] = []
        if key.startswith(TRACE_PREFIX):
            trace_key = key[len(TRACE_PREFIX):]
            for trace in log.traces:
                cell = _attribute_to_cell(
                    trace.attributes.get_by_key_or_global(trace_key, log.global_trace_attrs)
                )
                cells.extend([cell] * len(trace.events))
        else:
            for trace in log.traces:
                cells.extend(
                    _attribute_to_cell(
                        event.attributes.get_by_key_or_global(key, log.global_event_attrs)
                    )
                    for event in trace.events
                )
        columns[key] = _column(key, cells)
    if print_debug:
        print(
            "Creating a Series for every Attribute took "
            f"{time.perf_counter() - started:.2f}s"
        )

    started = time.perf_counter()
    frame = pd.DataFrame(columns) if columns else pd.DataFrame()
    if print_debug:
        print(
            "Constructing DF from Attribute Series took "
            f"{time.perf_counter() - started:.2f}s"
        )
    return frame


def _is_missing(cell: Any) -> bool:
    if cell is None or cell is pd.NA or cell is pd.NaT:
        return True
    return isinstance(cell, float) and math.isnan(cell)


def _cell_to_value(cell: Any) -> AttributeValue:
    if _is_missing(cell):
        return AttributeValue(AttributeType.NONE)
    if isinstance(cell, bool) or getattr(getattr(cell, "dtype", None), "kind", None) == "b":
        return AttributeValue(AttributeType.BOOLEAN, bool(cell))
    if isinstance(cell, str):
        return AttributeValue(AttributeType.STRING, cell)
    if isinstance(cell, pd.Timestamp):
        micros = cell.value // 1000
        return AttributeValue(AttributeType.DATE, _EPOCH + timedelta(microseconds=micros))
    if isinstance(cell, numbers.Integral):
        return AttributeValue(AttributeType.INT, int(cell))
    if isinstance(cell, numbers.Real):
        return AttributeValue(AttributeType.FLOAT, float(cell))
    return AttributeValue(AttributeType.STRING, repr(cell))


def convert_dataframe_to_log(df: pd.DataFrame) -> EventLog:
    """Rebuild an event log from a flat data frame.

    Rows are grouped into traces by the ``case:concept:name`` column, in order
    of first appearance. Columns prefixed with ``case:`` become trace
    attributes (added once for every row of the trace); the others become
    event attributes. Raises ValueError if the case column is missing.
    """
    if PREFIXED_TRACE_ID_NAME not in df.columns:
        raise ValueError(f"data frame has no {PREFIXED_TRACE_ID_NAME!r} column")
    columns = [str(c) for c in df.columns]
    traces: list[Trace] = []
    for _, group in df.groupby(PREFIXED_TRACE_ID_NAME, sort=False, dropna=False):
        trace_attributes = Attributes()
        events: list[Event] = []
        for row in group.itertuples(index=False, name=None):
            event_attributes = Attributes()
            for column, cell in zip(columns, row):
                value = _cell_to_value(cell)
                if column.startswith(TRACE_PREFIX):
                    trace_attributes.add(column[len(TRACE_PREFIX):], value)
                else:
                    event_attributes.add(column, value)
            events.append(Event(event_attributes))
        traces.append(Trace(trace_attributes, events))
    return EventLog(traces=traces)