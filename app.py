"""
GreenSlot Studio - Job Scheduling Optimizer
Streamlit front-end: find optimal time slots and regions based on carbon
intensity forecasts and spot pricing.
"""

import logging
import sys

import streamlit as st

from greenslot import InvalidJobRequest, JobRequest, Priority
from greenslot.charts import (
    RATING_COLORS,
    create_forecast_chart,
    create_ranking_chart,
    recommendations_frame,
)
from greenslot.config import get_settings
from greenslot.models import SlotRating
from greenslot.optimizer import SchedulingOptimizer

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    stream=sys.stdout,
)

st.set_page_config(page_title="GreenSlot Studio", page_icon="🌱", layout="wide")

st.markdown("""
<style>
    .app-header {
        font-size: 2.5rem;
        font-weight: 700;
        color: #2E7D32;
        text-align: center;
        margin-bottom: 0.3rem;
    }

    .app-tagline {
        font-size: 1rem;
        color: #9ca3af;
        text-align: center;
        margin-bottom: 1.5rem;
    }

    .slot-chip {
        text-align: center;
        padding: 6px 0;
        border-radius: 6px;
        font-size: 0.75rem;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_optimizer() -> SchedulingOptimizer:
    return SchedulingOptimizer()


def render_slot_strip(forecast):
    """24 coloured chips, one per hour, tinted by recommendation tier."""
    cols = st.columns(12)
    for slot in forecast:
        color = RATING_COLORS[slot.recommendation]
        cols[slot.hour % 12].markdown(
            f'<div class="slot-chip" style="background-color:{color}33" '
            f'title="{slot.label}: {slot.recommendation.value}">{slot.label}</div>',
            unsafe_allow_html=True,
        )
    st.caption(" · ".join(
        f'<span style="color:{RATING_COLORS[r]}">●</span> {r.value.title()}' for r in SlotRating
    ), unsafe_allow_html=True)


def main():
    optimizer = get_optimizer()
    locations = optimizer.catalog.get_locations()
    accelerators = optimizer.catalog.get_accelerators()

    st.markdown('<div class="app-header">🌱 Job Scheduling Optimizer</div>', unsafe_allow_html=True)
    st.markdown(
        '<div class="app-tagline">Find optimal time slots and regions based on carbon '
        'intensity forecasts and spot pricing</div>',
        unsafe_allow_html=True,
    )

    with st.sidebar:
        st.header("⚙️ Configuration")
        seed = st.number_input("Forecast seed", min_value=0, value=optimizer.settings.default_seed, step=1)
        st.info("Catalog: remote" if optimizer.catalog.is_remote else "Catalog: built-in")
        st.divider()
        st.markdown("### Slot Tiers")
        st.markdown("""
        - 🟢 **Excellent**: cheap and clean
        - 🔵 **Good**: better than average
        - 🟡 **Fair**: typical hour
        - 🔴 **Avoid**: evening peak pricing and carbon
        """)

    # Job configuration
    st.markdown("### 🗓️ Job Configuration")
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        job_name = st.text_input("Job Name", "LLaMA-70B Training")
    with col2:
        accelerator_id = st.selectbox(
            "Accelerator",
            options=[acc.id for acc in accelerators],
            format_func=lambda acc_id: next(
                f"{acc.model} ({acc.vendor})" for acc in accelerators if acc.id == acc_id
            ),
        )
    with col3:
        device_count = st.slider("Device Count", 1, 64, 8)
    with col4:
        duration_hours = st.slider("Duration (hours)", 1, 168, 24)

    priority = st.radio(
        "Optimization Priority",
        options=[p.value for p in Priority],
        index=2,
        horizontal=True,
        format_func=str.title,
    )

    # Carbon forecast for a single region
    st.markdown("### 🕒 24-Hour Carbon Intensity Forecast")
    region_code = st.selectbox(
        "Region",
        options=[loc.region_code for loc in locations],
        format_func=lambda code: next(
            f"{loc.region_name} ({loc.region_code})" for loc in locations if loc.region_code == code
        ),
    )
    if region_code:
        forecast = optimizer.get_forecast(region_code, seed=int(seed))
        st.plotly_chart(create_forecast_chart(forecast), use_container_width=True)
        render_slot_strip(forecast)

    st.markdown("---")

    if st.button("🔍 Analyze Schedule", use_container_width=True):
        job = JobRequest(
            name=job_name,
            accelerator=accelerator_id,
            device_count=device_count,
            duration_hours=duration_hours,
            priority=priority,
        )
        try:
            with st.spinner("Scoring regions..."):
                st.session_state.analysis = optimizer.analyze_with_summary(job, seed=int(seed))
                st.session_state.analysis_priority = priority
        except InvalidJobRequest as e:
            st.error(f"Invalid job: {e}")

    if 'analysis' in st.session_state:
        analysis = st.session_state.analysis
        recommendations = analysis['recommendations']
        summary = analysis['summary']

        if not recommendations:
            st.warning("No valid regions to rank")
            return

        for message in recommendations[0].warnings:
            st.warning(message)

        st.markdown("## 📉 Region Recommendations")
        st.caption(f"Ranked by sustainability score (priority: {st.session_state.analysis_priority})")

        df = recommendations_frame(recommendations[:5])
        st.dataframe(df, use_container_width=True, hide_index=True)
        st.plotly_chart(create_ranking_chart(recommendations), use_container_width=True)

        col_m1, col_m2, col_m3, col_m4 = st.columns(4)
        with col_m1:
            st.metric(label="📍 Best Region", value=summary['region_name'],
                      delta=f"Score: {summary['score']}", delta_color="off")
        with col_m2:
            st.metric(label="💵 Max Cost Savings", value=f"${summary['cost_usd']}",
                      delta=f"{summary['cost_pct']}% vs worst timing")
        with col_m3:
            st.metric(label="🍃 Max Carbon Savings", value=f"{summary['carbon_kg']} kg",
                      delta=f"{summary['carbon_pct']}% reduction")
        with col_m4:
            st.metric(label="⏰ Optimal Start Time", value=summary['optimal_start'] or "N/A",
                      delta=f"{summary['optimal_rating']} window", delta_color="off")

        with st.expander("📄 Full ranking"):
            st.dataframe(recommendations_frame(recommendations), use_container_width=True, hide_index=True)


if __name__ == "__main__":
    main()
