"""
Samudra Ledger - Streamlit Dashboard
Public view of blue-carbon projects and credit totals
"""

from datetime import datetime

import plotly.express as px
import plotly.graph_objects as go
import requests
import streamlit as st

from api import fetch_public_stats, projects_frame, retirement_rate

# Page configuration
st.set_page_config(
    page_title="Samudra Ledger",
    page_icon="🌊",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Sidebar configuration
st.sidebar.title("⚙️ Configuration")
api_url = st.sidebar.text_input("API Base URL", value="http://localhost:8000", key="api_url")

st.title("🌊 Samudra Ledger")
st.markdown("**Blue Carbon Registry: mangrove, seagrass and saltmarsh restoration credits**")

stats, is_demo = fetch_public_stats(api_url)
if is_demo:
    st.warning("⚠️ Could not reach the registry API. Showing DEMONSTRATION data, not live registry figures.")

tab1, tab2, tab3 = st.tabs(["📊 Overview", "🌱 Projects", "🔍 Health"])

# ============ OVERVIEW TAB ============
with tab1:
    st.header("Registry Overview")

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("🌱 Credits Issued", f"{stats.get('totalCreditsIssued', 0):,.0f} tCO2e")
    with col2:
        st.metric("♻️ Credits Retired", f"{stats.get('totalCreditsRetired', 0):,.0f} tCO2e")
    with col3:
        st.metric("📍 Projects", stats.get("totalProjects", 0))
    with col4:
        rate = retirement_rate(stats)
        st.metric("📉 Retired Share", f"{rate:.1f}%" if rate is not None else "N/A")

    st.divider()

    issued = stats.get("totalCreditsIssued") or 0
    retired = stats.get("totalCreditsRetired") or 0
    if issued:
        st.subheader("Issued vs Retired")
        fig = go.Figure(data=[go.Pie(
            labels=["Outstanding", "Retired"],
            values=[max(issued - retired, 0), retired],
            marker=dict(colors=["#00cc96", "#636efa"])
        )])
        fig.update_layout(height=400)
        st.plotly_chart(fig, width="stretch")

# ============ PROJECTS TAB ============
with tab2:
    st.header("Registered Projects")

    df = projects_frame(stats)
    if df.empty:
        st.info("No projects registered yet")
    else:
        st.dataframe(df, width="stretch", hide_index=True)

        col1, col2 = st.columns(2)
        with col1:
            st.subheader("Area by Ecosystem")
            fig = px.bar(
                df.groupby("Ecosystem", as_index=False)["Area (ha)"].sum(),
                x="Ecosystem",
                y="Area (ha)",
                color="Ecosystem"
            )
            st.plotly_chart(fig, width="stretch")
        with col2:
            st.subheader("Projects by Status")
            counts = df["Status"].value_counts().reset_index()
            counts.columns = ["Status", "Projects"]
            fig = px.pie(counts, names="Status", values="Projects")
            st.plotly_chart(fig, width="stretch")

# ============ HEALTH TAB ============
with tab3:
    st.header("API Health")
    if st.button("Test Connection"):
        try:
            response = requests.get(f"{api_url}/health", timeout=5)
            if response.status_code == 200:
                st.success(f"✅ Connected! (Status: {response.status_code})")
                st.json(response.json())
            else:
                st.error(f"❌ Unexpected status: {response.status_code}")
        except requests.exceptions.RequestException as e:
            st.error(f"❌ Connection failed: {str(e)}")

# Footer
st.divider()
st.markdown(
    f"**Samudra Ledger** | API: {api_url} | "
    f"{'Demo data' if is_demo else 'Live data'} | "
    f"Last updated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
)
