# src/views/write_letter.py
import streamlit as st

from layout.theme import hero
from layout.ui import card
from utils.camera import CameraSession, CameraState
from utils.errors import ImageProcessingError, SubmissionError, ValidationError
from utils.letters_repo import Behavior
from utils.submission import LetterDraft, LetterWizard, WizardStep
from utils.supabase_utils import get_supabase_client, images_bucket, letters_table

BEHAVIOR_LABELS = {Behavior.NICE: "⭐ Nice", Behavior.NAUGHTY: "😈 A Bit Naughty"}


def get_wizard() -> LetterWizard:
    if "letter_wizard" not in st.session_state:
        st.session_state["letter_wizard"] = LetterWizard()
    return st.session_state["letter_wizard"]


def get_camera() -> CameraSession:
    if "letter_camera" not in st.session_state:
        st.session_state["letter_camera"] = CameraSession()
    return st.session_state["letter_camera"]


def release_camera() -> None:
    """Close a camera left open by a dismissed dialog or by leaving the view."""
    cam = st.session_state.get("letter_camera")
    if cam is not None and cam.is_open:
        cam.close()


# ---------------------------------
# Camera dialog
# ---------------------------------
@st.dialog("📸 Take a Photo")
def camera_dialog():
    cam = get_camera()

    if cam.state is CameraState.ERROR:
        st.error(cam.error)
        c1, c2 = st.columns(2)
        if c1.button("Try again", use_container_width=True):
            cam.retake()
            st.rerun(scope="fragment")
        if c2.button("Cancel", use_container_width=True):
            cam.close()
            st.rerun()
        return

    if cam.stream_active:
        # the browser only holds the camera while this widget is on screen
        shot = st.camera_input("Smile for Santa!", key=f"camera_shot_{cam.acquisitions}")
        if shot is not None:
            try:
                cam.capture(shot.getvalue())
            except ImageProcessingError:
                pass
            st.rerun(scope="fragment")
        if st.button("Cancel", use_container_width=True):
            cam.close()
            st.rerun()
        return

    if cam.state is CameraState.CAPTURED:
        st.image(cam.photo, caption="Your photo", use_container_width=True)
        c1, c2 = st.columns(2)
        if c1.button("↺ Retake", use_container_width=True):
            cam.retake()
            st.rerun(scope="fragment")
        if c2.button("✓ Use Photo", type="primary", use_container_width=True):
            st.session_state["letter_photo"] = cam.confirm()
            st.rerun()


# ---------------------------------
# Steps
# ---------------------------------
def _compose(wizard: LetterWizard) -> None:
    hero("Dear Santa...", "Make a wish for Christmas!")
    draft = wizard.draft

    # a retried letter keeps the picture from the failed attempt
    if draft.image and "letter_photo" not in st.session_state:
        st.session_state["letter_photo"] = draft.image

    if st.button("📸 Take a photo instead", key="open_camera"):
        get_camera().open()
        camera_dialog()

    with st.form("letter_form"):
        c1, c2 = st.columns([4, 1])
        with c1:
            name = st.text_input("Your Name", value=draft.name, placeholder="Elf Buddy")
        with c2:
            age = st.text_input("Age", value=draft.age, placeholder="8")

        phone = st.text_input("Phone Number", value=draft.phone, placeholder="123-456-7890")
        email = st.text_input("Email", value=draft.email, placeholder="parent@example.com")

        behavior = st.radio(
            "I have been...",
            list(Behavior),
            index=list(Behavior).index(Behavior(draft.behavior)),
            format_func=lambda b: BEHAVIOR_LABELS[b],
            horizontal=True,
        )
        wishlist = st.text_area(
            "My Wishlist",
            value=draft.wishlist,
            placeholder="I would really like a puppy, a rocket ship, and world peace...",
            height=140,
        )

        uploaded = st.file_uploader("Drawings or Photos (Optional)", type=["jpg", "jpeg", "png", "gif", "webp"])
        photo = st.session_state.get("letter_photo")
        if photo and not uploaded:
            st.image(photo, caption="Attached photo", width=160)

        submitted = st.form_submit_button("✉️ Send to North Pole", use_container_width=True)

    if photo and st.button("Remove photo", key="remove_photo"):
        st.session_state.pop("letter_photo", None)
        wizard.draft = wizard.draft.without_image()
        st.rerun()

    if not submitted:
        return

    image = uploaded.getvalue() if uploaded else photo
    new_draft = LetterDraft(
        name=name,
        wishlist=wishlist,
        behavior=behavior,
        age=age,
        email=email,
        phone=phone,
        image=image,
    )
    try:
        wizard.begin(new_draft)
    except ValidationError as e:
        st.toast(f"Missing information: {e}", icon="⚠️")
        return
    st.rerun()


def _sending(wizard: LetterWizard) -> None:
    st.markdown(
        "<div style='text-align:center;font-size:64px'>✉️🦌🛷</div>",
        unsafe_allow_html=True,
    )
    with st.spinner("Sending your letter to the North Pole…"):
        try:
            wizard.run(
                get_supabase_client(),
                table=letters_table(),
                bucket=images_bucket(),
            )
        except SubmissionError as e:
            st.session_state["letter_error"] = str(e)
            st.rerun()
    st.session_state.pop("letter_photo", None)
    st.session_state["letter_celebrate"] = True
    st.rerun()


def _sent(wizard: LetterWizard) -> None:
    if st.session_state.pop("letter_celebrate", False):
        st.balloons()
    st.markdown(
        '<div class="sl-stamp">North Pole<br>Post<br>Dec 25</div>',
        unsafe_allow_html=True,
    )
    st.markdown("## ✅ Message Sent!")
    st.caption("Santa has received your letter.")
    with card("📜 A note from the North Pole"):
        st.markdown(
            f"*\"Ho Ho Ho! Thank you for your letter, **{wizard.submitted_name}**! "
            "The elves will start working right away!\"*"
        )
        st.markdown("<p style='text-align:right'><b>- Santa Claus</b></p>", unsafe_allow_html=True)
    if wizard.draft.image:
        st.image(wizard.draft.image, caption="Your upload", width=160)
    st.info("Used your phone number? Pick **Claim Your Ticket** in the sidebar for your event ticket.")
    if st.button("🔁 Write Another Letter", type="primary"):
        wizard.reset()
        st.rerun()


def run_write_letter():
    wizard = get_wizard()

    err = st.session_state.pop("letter_error", None)
    if err:
        st.toast(f"Oh no! {err}", icon="❄️")

    if wizard.step is WizardStep.COMPOSE:
        _compose(wizard)
    elif wizard.step is WizardStep.SENDING:
        _sending(wizard)
    else:
        _sent(wizard)
