import pandas as pd
import plotly.express as px
import streamlit as st

from goonline.controllers.analytics import display_label
from goonline.utils.errors import ui_error_boundary
from goonline.utils.typing import PlatformStats

COLORS = ["#3B82F6", "#10B981", "#F59E0B", "#EF4444", "#8B5CF6", "#EC4899", "#14B8A6"]

def category_frame(stats: PlatformStats) -> pd.DataFrame:
    return pd.DataFrame(
        [{"name": display_label(c.name), "value": c.count} for c in stats.categories],
        columns=["name", "value"],
    )

@ui_error_boundary
def render_metrics(stats: PlatformStats) -> None:
    """Four headline tiles."""
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("📊 Total Businesses", stats.total_count)
    with col2:
        st.metric("✅ Active Businesses", stats.active_count)
    with col3:
        st.metric("⏳ Pending Review", stats.pending_count)
    with col4:
        st.metric("🏢 My Businesses", stats.owned_by_current_user_count)

@ui_error_boundary
def render_category_charts(stats: PlatformStats) -> None:
    df = category_frame(stats)
    if df.empty:
        st.info("No businesses registered yet.")
        return

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Businesses by Category")
        fig = px.bar(df, x="name", y="value", labels={"name": "Category", "value": "Number of Businesses"},
                     color_discrete_sequence=COLORS[:1])
        st.plotly_chart(fig, use_container_width=True)
    with col2:
        st.subheader("Category Distribution")
        fig = px.pie(df, names="name", values="value", color_discrete_sequence=COLORS)
        fig.update_traces(textinfo="label+percent")
        st.plotly_chart(fig, use_container_width=True)

@ui_error_boundary
def render_overview(stats: PlatformStats) -> None:
    st.subheader("Platform Overview")
    col1, col2 = st.columns(2)
    with col1:
        st.metric("Business Approval Rate", f"{stats.approval_rate * 100:.1f}%")
    with col2:
        top = stats.most_popular_category
        st.metric("Most Popular Category", display_label(top) if top else "N/A")
