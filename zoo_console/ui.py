from __future__ import annotations

import html
from typing import List

import streamlit as st

from .models import RecordBase, Severity
from .resources import ResourceSpec
from .state.notifications import Notification


def set_page(title: str = "Zoo Console") -> None:
    st.set_page_config(page_title=title, page_icon="🦒", layout="wide")
    apply_branding()


def apply_branding() -> None:
    """Small CSS layer: centered workbench, tight banners."""
    st.markdown(
        """
        <style>
.block-container {
  max-width: 1180px;
  padding-top: 1.55rem;
  padding-bottom: 2.2rem;
}
.zoo-banner {
  border-radius: 10px;
  padding: 0.55rem 0.8rem;
  margin: 0.2rem 0 0.8rem 0;
  font-size: 0.95rem;
}
.zoo-banner.success {
  background: rgba(22, 163, 74, 0.14);
  border: 1px solid rgba(22, 163, 74, 0.45);
}
.zoo-banner.error {
  background: rgba(220, 38, 38, 0.14);
  border: 1px solid rgba(220, 38, 38, 0.45);
}
.zoo-divider {
  height: 1px;
  background: rgba(127,127,127,0.2);
  margin: 0.40rem 0 0.95rem 0;
}
        </style>
        """,
        unsafe_allow_html=True,
    )


def app_header(title: str, subtitle: str | None = None) -> None:
    st.markdown(f"## {html.escape(title)}")
    if subtitle:
        st.caption(subtitle)


def render_notification(n: Notification | None) -> None:
    """Banner for the live notification, if any."""
    if n is None:
        return
    kind = "success" if n.severity == Severity.SUCCESS else "error"
    esc = html.escape(n.text).replace("\n", "<br>")
    st.markdown(f"<div class='zoo-banner {kind}'>{esc}</div>", unsafe_allow_html=True)


def table_rows(spec: ResourceSpec, records: List[RecordBase]) -> List[dict]:
    """Records as display rows keyed by column title."""
    rows = []
    for r in records:
        dumped = r.model_dump(by_alias=True, mode="json")
        rows.append({spec.column_title(f): dumped.get(f) for f in spec.fields})
    return rows
