"""Per-browser-session state, kept in st.session_state.

Streamlit reruns the script on every interaction, so the controller (and the
caches it owns) must outlive a single run. One controller per session.
"""

from __future__ import annotations

import asyncio
from typing import Any, Coroutine, Dict, Optional, TypeVar

import streamlit as st

from ..api_client import ZooApiClient
from ..config import AppConfig
from ..controller import ConsoleState, SessionController
from ..forms import blank_form
from ..models import ResourceKind
from .notifications import NotificationSlot

T = TypeVar("T")


def ensure_controller(cfg: AppConfig) -> SessionController:
    """Return this session's controller, creating it on first use."""
    if "controller" not in st.session_state:
        state = ConsoleState(notifications=NotificationSlot(window_s=cfg.notification_window_s))
        st.session_state["controller"] = SessionController(ZooApiClient.from_config(cfg), state)
        st.session_state["loaded_once"] = False
    return st.session_state["controller"]


def reset_controller() -> None:
    """Drop the controller so the next run rebuilds it (e.g. new base URL)."""
    st.session_state.pop("controller", None)
    st.session_state.pop("loaded_once", None)


def run_sync(coro: Coroutine[Any, Any, T]) -> T:
    """Drive a controller coroutine to completion from a script run."""
    return asyncio.run(coro)


def form_get(kind: ResourceKind) -> Dict[str, str]:
    forms = st.session_state.setdefault("forms", {})
    kind = ResourceKind(kind)
    if kind.value not in forms:
        forms[kind.value] = blank_form(kind)
    return forms[kind.value]


def form_set(kind: ResourceKind, form: Dict[str, str]) -> None:
    forms = st.session_state.setdefault("forms", {})
    forms[ResourceKind(kind).value] = dict(form)
    # Widgets own their values once rendered; bump the generation so the
    # form is re-keyed and picks up the new defaults.
    st.session_state["form_gen"] = int(st.session_state.get("form_gen", 0)) + 1


def form_reset(kind: ResourceKind) -> None:
    form_set(kind, blank_form(kind))


def form_generation() -> int:
    return int(st.session_state.get("form_gen", 0))


def set_pending_delete(kind: ResourceKind, record_id: str) -> None:
    st.session_state["pending_delete"] = {"kind": ResourceKind(kind).value, "id": str(record_id)}


def pop_pending_delete() -> Optional[Dict[str, str]]:
    """Take the delete awaiting confirmation, if any (shown once)."""
    return st.session_state.pop("pending_delete", None)
