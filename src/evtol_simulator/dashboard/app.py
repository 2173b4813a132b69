"""eVTOL fleet simulator — Streamlit dashboard.

Run with:
    streamlit run src/evtol_simulator/dashboard/app.py

Layout: sidebar inputs → main area with two tabs (Fleet | Vehicles).
Fleet shows headline metrics, the per-manufacturer table and bar charts;
Vehicles lists every aircraft's end state and totals.
"""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from evtol_simulator.config import VEHICLE_PROFILES, SimulationConfig
from evtol_simulator.engine.simulation import run_simulation
from evtol_simulator.models.results import SimulationResult
from evtol_simulator.models.state import VehicleState
from evtol_simulator.reporting.tables import type_stats_frame

# ---------------------------------------------------------------------------
# Default instance — single source of truth for sidebar defaults
# ---------------------------------------------------------------------------
_DEF = SimulationConfig()

_STATE_COLORS = {
    VehicleState.READY: "#74b9ff",
    VehicleState.FLYING: "#00b894",
    VehicleState.QUEUED: "#fdcb6e",
    VehicleState.CHARGING: "#6c5ce7",
    VehicleState.FAULTED: "#d63031",
}

_CHART_LAYOUT = dict(
    height=300,
    margin=dict(l=20, r=20, t=40, b=20),
    showlegend=False,
    plot_bgcolor="rgba(0,0,0,0)",
    paper_bgcolor="rgba(0,0,0,0)",
)

st.set_page_config(page_title="eVTOL Fleet Simulator", page_icon="🚁", layout="wide")


@st.cache_data(show_spinner=False)
def _run_cached(config_json: str) -> str:
    config = SimulationConfig.model_validate_json(config_json)
    return run_simulation(config).model_dump_json()


def _bar(df: pd.DataFrame, column: str, title: str, color: str) -> go.Figure:
    fig = go.Figure(go.Bar(x=df["Vehicle Type"], y=df[column], marker_color=color))
    fig.update_layout(title=title, **_CHART_LAYOUT)
    return fig


# ---------------------------------------------------------------------------
# SIDEBAR — Inputs
# ---------------------------------------------------------------------------
st.sidebar.header("Simulation Inputs")

with st.sidebar.expander("Fleet & Chargers", expanded=True):
    num_vehicles = st.number_input("Vehicles", 1, 500, _DEF.num_vehicles)
    num_chargers = st.number_input("Chargers", 1, 100, _DEF.num_chargers)
    assignment = st.selectbox("Vehicle assignment", ["random", "equal"],
                              help="random = uniform draw per vehicle · equal = round-robin")

with st.sidebar.expander("Time", expanded=True):
    sim_hours = st.number_input("Duration (hours)", 0.1, 48.0, _DEF.sim_hours, 0.5)
    time_step_seconds = st.number_input("Tick size (seconds)", 0.1, 600.0, 5.0, 1.0,
                                        help="Larger ticks run faster; fault trials scale with tick length")
    seed = st.number_input("Seed", 0, 999_999, 42)

with st.sidebar.expander("Manufacturer Profiles"):
    st.dataframe(
        pd.DataFrame([p.model_dump(mode="json") for p in VEHICLE_PROFILES.values()]),
        use_container_width=True, hide_index=True,
    )

run_clicked = st.sidebar.button("Run Simulation", type="primary", use_container_width=True)

# ---------------------------------------------------------------------------
# MAIN
# ---------------------------------------------------------------------------
st.title("eVTOL Fleet Simulator")

if run_clicked:
    config = SimulationConfig(
        num_vehicles=int(num_vehicles),
        sim_hours=float(sim_hours),
        num_chargers=int(num_chargers),
        time_step_seconds=float(time_step_seconds),
        assignment=assignment,
        random_seed=int(seed),
    )
    with st.spinner("Simulating..."):
        st.session_state["result_json"] = _run_cached(config.model_dump_json())

if "result_json" not in st.session_state:
    st.info("Configure the fleet in the sidebar and press **Run Simulation**.")
    st.stop()

result = SimulationResult.model_validate_json(st.session_state["result_json"])
df = type_stats_frame(result)

fleet_tab, vehicles_tab = st.tabs(["Fleet", "Vehicles"])

with fleet_tab:
    totals = [v.total for v in result.vehicles]
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Flight hours", f"{sum(t.flight_time for t in totals):,.2f}")
    c2.metric("Passenger miles", f"{sum(t.passenger_miles for t in totals):,.0f}")
    c3.metric("Hours queued", f"{sum(t.queued_time for t in totals):,.2f}")
    c4.metric("Faults", f"{sum(t.faults for t in totals)}")

    st.subheader("Results by Vehicle Type")
    st.dataframe(df, use_container_width=True, hide_index=True)

    col_a, col_b, col_c = st.columns(3)
    col_a.plotly_chart(_bar(df, "Avg Flight Time (hrs)", "Avg flight time per flight (h)", "#00b894"),
                       use_container_width=True)
    col_b.plotly_chart(_bar(df, "Avg Charge Time (hrs)", "Avg charge time per session (h)", "#6c5ce7"),
                       use_container_width=True)
    col_c.plotly_chart(_bar(df, "Faults", "Faults", "#d63031"), use_container_width=True)

    counts = result.state_counts
    fig_states = go.Figure(go.Bar(
        x=[s.value for s in counts],
        y=list(counts.values()),
        marker_color=[_STATE_COLORS[s] for s in counts],
    ))
    fig_states.update_layout(title="Fleet state at end of run", **_CHART_LAYOUT)
    st.plotly_chart(fig_states, use_container_width=True)

with vehicles_tab:
    rows = [
        {
            "ID": v.id,
            "Type": v.manufacturer.value,
            "State": v.state.value,
            "Battery %": round(v.battery_pct, 1),
            "Flight (h)": round(v.total.flight_time, 4),
            "Queued (h)": round(v.total.queued_time, 4),
            "Charging (h)": round(v.total.charging_time, 4),
            "Faulted (h)": round(v.total.faulted_time, 4),
            "Distance (mi)": round(v.total.distance_traveled, 2),
            "Faults": v.total.faults,
        }
        for v in result.vehicles
    ]
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
