import streamlit as st

from answer_client import AnswerServiceClient
from config import setup_logging
from controller import SubmissionController
from image_utils import split_data_url
from models import Notification

EXAMPLE_QUESTIONS = [
    "What is the angle between two vectors A and B if their resultant is perpendicular to A?",
    "Derive the equation of motion: v² = u² + 2as with complete steps",
    "Explain Le Chatelier's principle with real-life examples",
    "Solve: ∫(x² + 3x + 2)dx and explain the integration steps",
    "What is the difference between mitosis and meiosis? Explain with diagrams",
    "A silver wire has mass 0.6g, radius 0.5mm. Calculate maximum percentage error in density measurement",
]

TOAST_ICONS = {"success": "✅", "info": "ℹ️", "destructive": "⚠️"}

# ---------- Utility: safe Streamlit rerun (supports old and new API) ----------

def _safe_rerun() -> None:
    if hasattr(st, "rerun"):
        st.rerun()
    elif hasattr(st, "experimental_rerun"):
        st.experimental_rerun()

def _queue_toast(notification: Notification | None) -> None:
    if notification is not None:
        st.session_state['toasts'].append(notification)

def _flush_toasts() -> None:
    for n in st.session_state['toasts']:
        st.toast(f"**{n.title}** {n.description}", icon=TOAST_ICONS[n.variant])
    st.session_state['toasts'] = []

# Page config
st.set_page_config(page_title="KK Sir Q&A", layout="wide")
setup_logging()

# ── Basic styling tweaks ───────────────────────────────────────────────
st.markdown(
    """
    <style>
    section.main > div { max-width: 900px; margin-left: auto; margin-right: auto; }
    </style>
    """,
    unsafe_allow_html=True,
)

# One controller per browser session
if 'controller' not in st.session_state:
    st.session_state['controller'] = SubmissionController(AnswerServiceClient())
if 'toasts' not in st.session_state:
    st.session_state['toasts'] = []
if 'question_input' not in st.session_state:
    st.session_state['question_input'] = ""
if 'question_pending' in st.session_state:
    st.session_state['question_input'] = st.session_state.pop('question_pending')

controller: SubmissionController = st.session_state['controller']

st.title("📚 Ask Any Academic Question")
st.write(
    "Get step-by-step solutions for Physics, Chemistry, Mathematics (JEE), Biology (NEET), "
    "English, and all NCERT subjects (Class 6-12). Upload images or type your questions."
)

# --- Question input -------------------------------------------------------------

question = st.text_area(
    "Your Question",
    key="question_input",
    height=120,
    placeholder="Example: Solve this calculus problem, explain Newton's third law, ...",
)
controller.set_question(question)

# --- Image attachment -----------------------------------------------------------

state = controller.state
if state.attachment is not None:
    _, image_bytes = split_data_url(state.attachment.data_uri)
    st.image(image_bytes, caption=state.image_file_name, width=320)
    if st.button("✖ Remove image"):
        controller.remove_image()
        st.session_state.pop('last_upload', None)
        _safe_rerun()
else:
    uploaded = st.file_uploader(
        "Upload Question Image",
        type=["png", "jpg", "jpeg", "gif", "webp", "bmp"],
        key=f"image_picker_{controller.picker_nonce}",
    )
    if uploaded is not None and st.session_state.get('last_upload') != uploaded.file_id:
        st.session_state['last_upload'] = uploaded.file_id
        outcome = controller.attach_image(uploaded).result()
        _queue_toast(outcome.notification)
        if outcome.ok:
            _safe_rerun()

# --- Ask ------------------------------------------------------------------------

if st.button("Ask Question", disabled=controller.loading):
    future = controller.ask_question()
    with st.spinner("Processing..."):
        outcome = future.result()
    _queue_toast(outcome.notification)

# --- Answer ---------------------------------------------------------------------

state = controller.state
if state.answer:
    st.subheader("📖 Answer")
    st.markdown(state.answer)
    col_download, col_delete = st.columns(2)
    download = controller.prepare_download()
    with col_download:
        if st.download_button(
            "Download",
            data=download.data,
            file_name=download.file_name,
            mime=download.mime_type,
        ):
            _queue_toast(controller.download_answer().notification)
    with col_delete:
        if st.button("🗑 Delete", type="primary"):
            _queue_toast(controller.clear_all().notification)
            st.session_state['question_pending'] = ""
            st.session_state.pop('last_upload', None)
            _safe_rerun()
elif not state.loading:
    st.subheader("Example Questions")
    for i, example in enumerate(EXAMPLE_QUESTIONS):
        if st.button(example, key=f"example_{i}"):
            st.session_state['question_pending'] = example
            _safe_rerun()

_flush_toasts()
