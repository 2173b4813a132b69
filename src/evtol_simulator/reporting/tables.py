"""Per-manufacturer results tables.

``type_stats_frame`` is the tabular form used by the dashboard;
``format_type_table`` renders the same rows as fixed-width text for run logs.
The CLI builds its own rich table in ``cli.render_type_table``.
"""

from __future__ import annotations

import pandas as pd

from evtol_simulator.models.results import SimulationResult, VehicleTypeSummary

TYPE_TABLE_COLUMNS: list[tuple[str, str]] = [
    ("manufacturer", "Vehicle Type"),
    ("vehicle_count", "Count"),
    ("total_flights", "Flights"),
    ("total_charges", "Charges"),
    ("avg_flight_time_per_flight", "Avg Flight Time (hrs)"),
    ("avg_distance_per_flight", "Avg Distance (miles)"),
    ("avg_charging_time_per_session", "Avg Charge Time (hrs)"),
    ("total_faults", "Faults"),
    ("fault_rate", "Faults / Vehicle"),
    ("faults_per_flight_hour", "Faults / Flight Hr"),
    ("total_passenger_miles", "Passenger Miles"),
]


def _row(summary: VehicleTypeSummary) -> dict[str, object]:
    data = summary.model_dump()
    data["manufacturer"] = summary.manufacturer.value
    return {label: data[key] for key, label in TYPE_TABLE_COLUMNS}


def type_stats_frame(result: SimulationResult) -> pd.DataFrame:
    """One row per manufacturer present in the fleet, labelled columns."""
    rows = [_row(s) for s in result.type_stats]
    return pd.DataFrame(rows, columns=[label for _, label in TYPE_TABLE_COLUMNS])


def format_type_table(result: SimulationResult, col_width: int = 12) -> str:
    """Fixed-width text table (vehicle type, count, averages, faults, passenger miles)."""
    headers = [
        ("Vehicle", "Type"),
        ("Count", ""),
        ("Avg Flight", "Time (hrs)"),
        ("Avg Dist", "(miles)"),
        ("Avg Charge", "Time (hrs)"),
        ("Faults", "(Count %)"),
        ("PAX Miles", "(miles)"),
    ]

    def line(cells: list[str]) -> str:
        return " | ".join(c.rjust(col_width) for c in cells) + " |"

    separator = "-" * len(line([""] * len(headers)))
    out = [separator, line([h[0] for h in headers]), line([h[1] for h in headers]), separator]
    for s in result.type_stats:
        out.append(line([
            s.manufacturer.value,
            str(s.vehicle_count),
            f"{s.avg_flight_time_per_flight:.6f}",
            f"{s.avg_distance_per_flight:.6f}",
            f"{s.avg_charging_time_per_session:.6f}",
            f"{s.total_faults} ({s.fault_rate * 100:.1f}%)",
            f"{s.total_passenger_miles:.6f}",
        ]))
    out.append(separator)
    return "\n".join(out)
