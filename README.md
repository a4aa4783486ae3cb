# procmine

`procmine` is a small process-mining library. It models event logs in
memory, projects them onto activity variants, builds directly-follows
graphs, and flattens logs into pandas DataFrames and back.

## Modules

- `procmine.model`: the event log data model. It holds `AttributeValue`
  (typed by `AttributeType`), `Attribute`, `Attributes`, `Event`, `Trace`,
  `EventLog`, `EventLogExtension` and `EventLogClassifier`.
  `AttributeValue.to_dict` and `AttributeValue.from_dict` convert values to
  and from JSON-compatible `{"type": ..., "content": ...}` mappings.
  `EventLogClassifier.class_identity` joins the string values of the
  classifier's keys with `+`; a missing or non-string value counts as an
  empty string. The module also defines the constants `ACTIVITY_NAME`
  (`concept:name`), `TRACE_PREFIX` (`case:`), `TRACE_ID_NAME` and
  `PREFIXED_TRACE_ID_NAME` (`case:concept:name`).
- `procmine.activity_projection`: `EventLogActivityProjection` reduces a
  log to activity variants with their frequencies. Activities are numbered
  in the order they first appear, and events without a string
  `concept:name` count as `"No Activity"`. `ActivityProjectionDFG` is the
  weighted directly-follows graph of such a projection.
  `ActivityProjectionDFG.from_event_log_projection` raises `ValueError` for
  a projection without traces. `add_start_end_acts_proj` adds the
  artificial `__START` and `__END` activities to every variant, and
  `add_start_end_acts` adds them as events to every trace of an `EventLog`.
- `procmine.dfg`: `DirectlyFollowsGraph` counts activities and
  directly-follows relations, and records start and end activities.
  `to_json` and `from_json` write and read it as JSON, with relations as
  `[[from, to], frequency]` pairs. `from_json` raises `ValueError` on
  malformed input.
- `procmine.dataframe`: `convert_log_to_dataframe` flattens an `EventLog`
  into one row per event. Trace attributes become columns prefixed with
  `case:`, and columns are sorted by name. `convert_dataframe_to_log`
  groups rows by `case:concept:name` to rebuild the traces. It raises
  `ValueError` if that column is missing.

## Example: an event log and its activity projection

```python
from procmine.model import AttributeType, AttributeValue, Event, EventLog, Trace
from procmine.activity_projection import (
    ActivityProjectionDFG,
    EventLogActivityProjection,
    add_start_end_acts_proj,
)

first = Trace(events=[Event.from_activity(a) for a in ["a", "b", "c"]])
first.attributes.add("concept:name", AttributeValue(AttributeType.STRING, "case-1"))
second = Trace(events=[Event.from_activity(a) for a in ["a", "c", "b"]])
second.attributes.add("concept:name", AttributeValue(AttributeType.STRING, "case-2"))
log = EventLog(traces=[first, second])

projection = EventLogActivityProjection.from_event_log(log)
print(projection.activities)        # ['a', 'b', 'c']
add_start_end_acts_proj(projection)
dfg = ActivityProjectionDFG.from_event_log_projection(projection)
print(dfg.df_between(0, 1))         # 1 (a directly followed by b once)
```

## Example: a directly-follows graph

```python
from procmine.dfg import DirectlyFollowsGraph

graph = DirectlyFollowsGraph.create_from_log(log)   # default classifier: concept:name
print(graph.activities)              # {'a': 2, 'b': 2, 'c': 2}
print(graph.start_activities)        # {'a'}
assert graph.contains_df_relation(("c", "b"))

graph.remove_activity("c")
same = DirectlyFollowsGraph.from_json(graph.to_json())
print(same.directly_follows_relations)   # {('a', 'b'): 1}
```

## Example: an event log as a DataFrame

```python
from procmine.dataframe import convert_dataframe_to_log, convert_log_to_dataframe

df = convert_log_to_dataframe(log, False)
print(list(df.columns))              # ['case:concept:name', 'concept:name']
restored = convert_dataframe_to_log(df)
print(len(restored.traces))          # 2
```

`convert_dataframe_to_log` adds every `case:` column to the trace once for
each row of the trace. A restored trace therefore holds one copy of each
trace attribute per event.

## What this package does not do

- It does not read or write XES or OCEL files. Event logs are built in
  memory from the `procmine.model` classes, or from a DataFrame.
- It does not discover Petri nets. It has no log repair, no place-candidate
  building or pruning, and no Alpha+++ discovery.
- It does not render directly-follows graphs as DOT source or as images.
- It has no command-line tool.