"""Reporting utilities for BackpropNet."""

from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter

__all__ = ["CsvSink", "JsonlSink", "PlotAdapter"]
