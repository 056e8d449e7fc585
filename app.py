import logging

import streamlit as st

from core import settings
from modules.dashboard import get_view_state, reload_customers, render_dashboard
from modules.customer_details import render_customer_details

logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)

st.set_page_config(page_title="LoanBook", layout="wide")

st.sidebar.title("LoanBook")
st.sidebar.caption(f"Backend: {settings.API_BASE_URL}")

state = get_view_state()

# first run of the session only; later reloads come from Refresh / form submits
if state["request_generation"] == 0:
    with st.spinner("Loading customers..."):
        reload_customers(state)

if state["selected_customer_id"] is not None:
    render_customer_details(state)
else:
    render_dashboard(state)
