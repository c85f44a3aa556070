# streamlit_app/app.py
"""
Mining Materials Dashboard

Pages:
- One page per industry vertical: active mines by country (pie per material)
  and recent commodity prices (line chart)
- System Health
"""

import streamlit as st

from api_client import APIClient, APIError
from charts import material_label, price_frame, price_line_chart, producer_pie

# Page config
st.set_page_config(
    page_title="Mining Materials Dashboard",
    page_icon="⛏️",
    layout="wide",
    initial_sidebar_state="expanded"
)

PAGES = {
    "🚗 Car Production": "automotive",
    "✈️ Aerospace": "aerospace",
    "🌱 Fertilizer": "fertilizer",
    "🔩 Stainless Steel": "stainless_steel",
}

INTROS = {
    "automotive": "Materials used in vehicle bodies, wiring and EV batteries.",
    "aerospace": "Light alloys, superalloys and electronics materials for aircraft.",
    "fertilizer": "Phosphate and potassium sources plus micronutrient metals.",
    "stainless_steel": "Alloying elements and raw materials for stainless steel.",
}

PIES_PER_ROW = 3


# Initialize API client
@st.cache_resource
def get_api_client():
    return APIClient()

api = get_api_client()

# Sidebar
st.sidebar.markdown("# ⛏️ Mining Materials")
st.sidebar.markdown("**Active mines and commodity prices by industry**")
st.sidebar.markdown("---")

page = st.sidebar.radio(
    "📍 Navigation",
    list(PAGES) + ["🔧 System Health"]
)

st.sidebar.markdown("---")
st.sidebar.caption("Built with FastAPI + PostgreSQL")


def render_report(vertical: str, title: str) -> None:
    st.title(title)
    st.caption(INTROS[vertical])

    with st.spinner(f"Loading {title.split(' ', 1)[-1].lower()} data..."):
        report = api.get_report(vertical)

    stock_prices = report.pop("stockPrices", {})

    st.subheader("Active mines by country")
    keys = list(report)
    for row_start in range(0, len(keys), PIES_PER_ROW):
        cols = st.columns(PIES_PER_ROW)
        for offset, key in enumerate(keys[row_start:row_start + PIES_PER_ROW]):
            with cols[offset]:
                entries = report[key]
                if entries:
                    fig = producer_pie(entries, key, palette_index=row_start + offset)
                    st.plotly_chart(fig, use_container_width=True)
                else:
                    st.markdown(f"**{material_label(key)}**")
                    st.info("No active mines recorded.")

    st.markdown("---")
    st.subheader("Price trends")
    fig = price_line_chart(stock_prices)
    if fig is None:
        st.info("No price data in the current window.")
    else:
        st.plotly_chart(fig, use_container_width=True)
        with st.expander("Price data"):
            st.dataframe(price_frame(stock_prices), use_container_width=True)


if page in PAGES:
    try:
        render_report(PAGES[page], page)
    except APIError as e:
        st.error(f"Error loading data: {e.message}")
    except Exception as e:
        st.error(f"Error loading data: {e}")
        st.info("Make sure FastAPI is running: `uvicorn app.main:app --reload`")

# ============================================
# 🔧 SYSTEM HEALTH
# ============================================
elif page == "🔧 System Health":
    st.title("🔧 System Health")
    try:
        health = api.get_health()
        status = health.get("status", "unknown")
        if status == "healthy":
            st.success(f"API status: {status}")
        else:
            st.warning(f"API status: {status}")

        cols = st.columns(max(len(health.get("dependencies", {})), 1))
        for col, (name, dep_status) in zip(cols, health.get("dependencies", {}).items()):
            with col:
                st.metric(name.capitalize(), dep_status)

        st.caption(f"Version {health.get('version', '?')} · checked {health.get('timestamp', '')}")
    except Exception as e:
        st.error(f"Error: {e}")
