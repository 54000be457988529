from __future__ import annotations
import logging
from datetime import date

import pandas as pd
import streamlit as st

from calendar_grid import month_cells, shift_anchor, week_dates_of, week_hour_grid
from forms import FormValidationError, validate_event_form, validate_subject_form
from metrics import compute_metrics, subject_progress
from models import SUBJECT_COLORS, ParseError, StudyEvent
from paths import get_data_dir, setup_logging
from storage import JsonFileStorage
from store import StudyStore


DAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
COLOR_NAMES = dict(zip(
    SUBJECT_COLORS,
    ["Red", "Orange", "Yellow", "Green", "Cyan", "Blue", "Violet", "Pink"],
))

st.set_page_config(page_title="StudyPlan", page_icon="📅", layout="wide")


def _ensure_session_state() -> StudyStore:
    if "store" not in st.session_state:
        storage = JsonFileStorage(get_data_dir())
        try:
            st.session_state.store = StudyStore.open(storage)
        except ParseError as e:
            logging.getLogger(__name__).error("Could not load saved data: %s", e)
            st.error(f"Saved data could not be read and was left untouched: {e}")
            st.stop()

    if "anchor" not in st.session_state:
        st.session_state.anchor = date.today()
    if "view" not in st.session_state:
        st.session_state.view = "week"

    return st.session_state.store


def _queue_toast(message: str) -> None:
    st.session_state.toast_message = message


def _flush_toast() -> None:
    message = st.session_state.pop("toast_message", None)
    if message:
        st.toast(message)


def _subject_color(store: StudyStore, event: StudyEvent) -> str:
    subject = store.get_subject(event.subject_id)
    return subject.color if subject else "#9CA3AF"


def _render_event(store: StudyStore, event: StudyEvent, key: str, compact: bool = False) -> None:
    color = _subject_color(store, event)
    label = event.title if compact else f"{event.title} · {event.start_time}-{event.end_time}"
    if event.completed:
        st.markdown(
            f"<div style='border-left:3px solid {color};padding-left:4px;opacity:0.6;font-size:0.8em'>"
            f"{label}<br/><em>Completed</em></div>",
            unsafe_allow_html=True,
        )
        return

    st.markdown(
        f"<div style='border-left:3px solid {color};height:4px'></div>",
        unsafe_allow_html=True,
    )
    if st.button(label, key=key, help="Mark as completed", use_container_width=True):
        if store.complete_event(event.id):
            _queue_toast("Session completed! Your study time was logged.")
        st.rerun()


def render_sidebar(store: StudyStore) -> None:
    metrics = compute_metrics(store.subjects, store.events)

    st.header("Study metrics")
    st.caption(f"Weekly progress: {round(metrics.completion_rate)}%")
    st.progress(min(100.0, max(0.0, metrics.completion_rate)) / 100)
    a, b = st.columns(2)
    a.metric("Hours today", round(metrics.today_hours, 2))
    b.metric("Total hours", round(metrics.total_studied_hours))

    st.divider()
    st.header("Subjects")
    subjects = store.subjects
    if not subjects:
        st.info("No subjects yet.")
    else:
        rows = [
            {
                "Subject": s.name,
                "Studied (h)": round(s.studied_hours, 2),
                "Weekly (h)": s.weekly_hours,
                "Progress": min(100.0, max(0.0, subject_progress(s))),
            }
            for s in subjects
        ]
        st.dataframe(
            pd.DataFrame(rows),
            hide_index=True,
            use_container_width=True,
            column_config={
                "Progress": st.column_config.ProgressColumn(
                    "Progress", format="%.0f%%", min_value=0, max_value=100
                ),
            },
        )

    st.subheader("Add subject")
    with st.form("add_subject_form", clear_on_submit=True):
        name = st.text_input("Subject name", placeholder="e.g. Math")
        weekly_hours = st.number_input(
            "Weekly hours", min_value=1, max_value=40, value=5, step=1
        )
        color = st.selectbox(
            "Color",
            SUBJECT_COLORS,
            index=0,
            format_func=lambda c: f"{COLOR_NAMES.get(c, c)} ({c})",
        )
        if st.form_submit_button("Add subject", type="primary"):
            try:
                form = validate_subject_form(name, weekly_hours, color)
            except FormValidationError as e:
                st.warning(str(e))
            else:
                store.add_subject(form.name, form.weekly_hours, form.color)
                _queue_toast(f"{form.name} was added.")
                st.rerun()


def render_add_event(store: StudyStore) -> None:
    subjects = {s.id: s for s in store.subjects}
    with st.expander("Add study event", expanded=False):
        if not subjects:
            st.info("Add a subject first.")
            return
        with st.form("add_event_form", clear_on_submit=True):
            subject_id = st.selectbox(
                "Subject",
                list(subjects),
                index=None,
                placeholder="Choose a subject",
                format_func=lambda sid: subjects[sid].name,
            )
            title = st.text_input("Event title", placeholder="e.g. Algebra review")
            day = st.date_input("Date", value=date.today())
            col_start, col_end = st.columns(2)
            with col_start:
                start_time = st.time_input("Start time", value=None, step=900)
            with col_end:
                end_time = st.time_input("End time", value=None, step=900)
            if st.form_submit_button("Create event", type="primary"):
                try:
                    form = validate_event_form(subject_id, title, day, start_time, end_time)
                except FormValidationError as e:
                    st.warning(str(e))
                else:
                    store.add_study_event(
                        form.subject_id, form.title, form.day, form.start_time, form.end_time
                    )
                    _queue_toast(f"Study session scheduled: {form.title}.")
                    st.rerun()


def render_navigation() -> None:
    anchor: date = st.session_state.anchor
    view = st.session_state.view

    col_prev, col_title, col_next, col_today = st.columns([1, 4, 1, 1])
    if col_prev.button("← Previous"):
        st.session_state.anchor = shift_anchor(anchor, view, -1)
        st.rerun()
    if col_next.button("Next →"):
        st.session_state.anchor = shift_anchor(anchor, view, 1)
        st.rerun()
    if col_today.button("Today"):
        st.session_state.anchor = date.today()
        st.rerun()

    if view == "week":
        week = week_dates_of(anchor)
        col_title.subheader(f"Week of {week[0].isoformat()} - {week[-1].isoformat()}")
    else:
        col_title.subheader(anchor.strftime("%B %Y"))


def render_week(store: StudyStore) -> None:
    anchor: date = st.session_state.anchor
    week = week_dates_of(anchor)
    today = date.today()

    header = st.columns(8)
    header[0].markdown("**Hour**")
    for col, d in zip(header[1:], week):
        marker = " ●" if d == today else ""
        col.markdown(f"**{DAY_LABELS[(d.weekday() + 1) % 7]}** {d.day}{marker}")

    for hour, buckets in week_hour_grid(anchor, store.events):
        row = st.columns(8)
        row[0].caption(f"{hour}:00")
        for col, d, events in zip(row[1:], week, buckets):
            with col:
                for ev in events:
                    _render_event(store, ev, key=f"week_{ev.id}_{d.isoformat()}")


def render_month(store: StudyStore) -> None:
    anchor: date = st.session_state.anchor
    cells = month_cells(anchor, store.events)

    header = st.columns(7)
    for col, label in zip(header, DAY_LABELS):
        col.markdown(f"**{label}**")

    for week_start in range(0, len(cells), 7):
        row = st.columns(7)
        for col, cell in zip(row, cells[week_start:week_start + 7]):
            with col:
                label = f"**{cell.day.day}**" if cell.in_month else f":gray[{cell.day.day}]"
                if cell.is_today:
                    label = f":blue[{cell.day.day}]"
                st.markdown(label)
                for ev in cell.events:
                    _render_event(store, ev, key=f"month_{ev.id}", compact=True)
                if cell.hidden_count:
                    st.caption(f"+{cell.hidden_count} more")


setup_logging()
store = _ensure_session_state()

st.title("StudyPlan")
st.caption("Plan study sessions per subject and track your weekly progress.")
_flush_toast()

with st.sidebar:
    render_sidebar(store)

view_label = st.radio(
    "View", ["Week", "Month"], horizontal=True,
    index=0 if st.session_state.view == "week" else 1,
)
st.session_state.view = view_label.lower()

render_add_event(store)
render_navigation()

if st.session_state.view == "week":
    render_week(store)
else:
    render_month(store)
