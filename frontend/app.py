import os
import sys
import html
import asyncio
import logging

import streamlit as st

# Allow `streamlit run frontend/app.py` from a plain checkout
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.append(os.path.join(PROJECT_ROOT, "src"))

from calorie_estimator import config
from calorie_estimator.controller import EstimationController

# --- Configuration and Setup ---
st.set_page_config(page_title="Food Calorie Estimator", page_icon="🍽️", layout="centered")

# Setup console logging
logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# --- Initialize Session State ---
if "controller" not in st.session_state:
    st.session_state.controller = EstimationController()

controller = st.session_state.controller
state = controller.state

# --- Custom CSS ---
st.markdown("""
<style>
h1 {
    color: #5B21B6;
    font-weight: 800;
    text-align: center;
}
.result-box {
    background-color: #EFF6FF;
    border: 1px solid #BFDBFE;
    border-radius: 12px;
    padding: 16px 20px;
    margin-top: 12px;
}
.result-box strong {
    color: #1D4ED8;
}
.custom-placeholder {
    text-align: center;
    color: #6B7280;
    padding: 24px;
    border: 2px dashed #D1D5DB;
    border-radius: 10px;
}
</style>
""", unsafe_allow_html=True)


# --- Callbacks ---
def on_file_change(key):
    # Fires with None when the user removes the file
    uploaded_file = st.session_state.get(key)
    controller.select_image(uploaded_file)


def on_clear():
    controller.clear()
    # A fresh key resets the uploader widget
    st.session_state.uploader_generation = st.session_state.get("uploader_generation", 0) + 1


def on_estimate():
    # Only marks the request; it runs below, after the button is drawn disabled
    controller.request_estimate()


# --- Page ---
st.title("Food Calorie Estimator")
st.markdown("Upload a photo of a meal and get a short description with an estimated calorie count.")

uploader_key = "file_uploader_key"
if st.session_state.get("uploader_generation"):
    uploader_key = f"file_uploader_key_{st.session_state.uploader_generation}"

st.file_uploader(
    "Upload Food Image",
    type=config.ACCEPTED_IMAGE_TYPES,
    key=uploader_key,
    on_change=on_file_change,
    args=(uploader_key,),
)

if state.preview is not None:
    st.subheader("Image Preview")
    st.image(state.preview, use_container_width=True)
elif state.image is not None:
    st.markdown("<div class='custom-placeholder'><p>Could not load image preview.</p></div>", unsafe_allow_html=True)

action_cols = st.columns([0.7, 0.3])
with action_cols[0]:
    st.button(
        "Estimating..." if state.pending or state.loading else "Estimate Calories",
        type="primary",
        use_container_width=True,
        disabled=not state.can_estimate,
        on_click=on_estimate,
    )
with action_cols[1]:
    st.button(
        "🗑️ Clear",
        use_container_width=True,
        disabled=state.pending or state.loading or (state.image is None and state.result is None and not state.error),
        on_click=on_clear,
    )

if state.pending:
    with st.spinner("Estimating..."):
        asyncio.run(controller.run_pending())
    st.rerun()

if state.error:
    st.error(state.error, icon="❌")

if state.result is not None:
    st.subheader("Estimation Results")
    st.markdown(
        f"<div class='result-box'>"
        f"<p><strong>Description:</strong> {html.escape(state.result.description)}</p>"
        f"<p><strong>Estimated Calories:</strong> {html.escape(state.result.calories)}</p>"
        f"</div>",
        unsafe_allow_html=True,
    )
elif state.image is None and not state.error:
    st.markdown("<div class='custom-placeholder'><p>Upload an image and click 'Estimate Calories' to see the result.</p></div>", unsafe_allow_html=True)

# --- Sidebar ---
st.sidebar.markdown("## 🍽️ Calorie Estimator")
st.sidebar.markdown(f"**Model:** `{config.GEMINI_MODEL}`")
if not config.GEMINI_API_KEY:
    st.sidebar.warning("GEMINI_API_KEY is not set. Add it to your environment or a .env file.", icon="🔑")
st.sidebar.markdown("---")
st.sidebar.markdown("Estimates are approximate and depend on portion size visible in the photo.")
