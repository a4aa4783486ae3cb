"""Process mining: event log model, activity projections, directly-follows graphs and DataFrame conversion."""

__version__ = "0.1.0"

__all__ = [
    "model",
    "activity_projection",
    "dfg",
    "dataframe",
]