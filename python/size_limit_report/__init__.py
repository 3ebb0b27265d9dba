"""Size-limit result comparison and pull request reporting."""

from .compare import has_size_changes, report_mode
from .formatting import format_change, format_results
from .model import MeasurementRecord, Snapshot, Timing, empty_record, lookup
from .results import ParseError, parse_results

__all__ = [
    "MeasurementRecord",
    "ParseError",
    "Snapshot",
    "Timing",
    "empty_record",
    "format_change",
    "format_results",
    "has_size_changes",
    "lookup",
    "parse_results",
    "report_mode",
]
