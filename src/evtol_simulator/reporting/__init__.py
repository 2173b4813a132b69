"""Reporting — run log files and results tables built from engine snapshots."""

from evtol_simulator.reporting.tables import format_type_table, type_stats_frame
from evtol_simulator.reporting.run_log import RunLogWriter, default_log_path

__all__ = [
    "format_type_table",
    "type_stats_frame",
    "RunLogWriter",
    "default_log_path",
]
