from __future__ import annotations

import streamlit as st

from zoo_console.config import AppConfig, get_last_loaded_config_path, load_app_config
from zoo_console.controller import SessionController
from zoo_console.errors import FormError
from zoo_console.forms import form_from_record, payload_from_form
from zoo_console.logging_utils import get_logger, init_logging
from zoo_console.models import Gender, ResourceKind
from zoo_console.resources import all_specs, spec_for
from zoo_console.state.session import (
    ensure_controller,
    form_generation,
    form_get,
    form_reset,
    form_set,
    pop_pending_delete,
    run_sync,
    set_pending_delete,
)
from zoo_console.ui import app_header, render_notification, set_page, table_rows


def get_cfg() -> AppConfig:
    if "cfg" not in st.session_state:
        cfg = load_app_config()
        st.session_state["cfg"] = cfg
        init_logging(cfg.data_dir, level=cfg.log_level)
        get_logger().info(
            "Config loaded: path=%s api_base_url=%s",
            get_last_loaded_config_path(),
            cfg.api_base_url,
        )
    return st.session_state["cfg"]


def get_controller() -> SessionController:
    return ensure_controller(get_cfg())


def _select(controller: SessionController, kind: ResourceKind) -> None:
    editing = controller.edit_session
    with st.spinner(f"Loading {spec_for(kind).plural.lower()}..."):
        run_sync(controller.select(kind))
    # The edit session is gone; don't leave its prefilled values behind.
    if editing is not None:
        form_reset(editing.kind)


def render_tabs(controller: SessionController) -> ResourceKind:
    specs = all_specs()
    labels = [s.plural for s in specs]
    current = spec_for(controller.active_kind).plural
    choice = st.radio(
        "Collection",
        labels,
        index=labels.index(current),
        horizontal=True,
        key="collection_tab",
        label_visibility="collapsed",
    )
    kind = specs[labels.index(choice)].kind

    if kind != controller.active_kind or not st.session_state.get("loaded_once"):
        st.session_state["loaded_once"] = True
        _select(controller, kind)
    return kind


@st.fragment(run_every=1.0)
def render_notification_slot() -> None:
    # Re-rendered every second so expired notifications disappear on their own.
    render_notification(get_controller().notification)


def render_list(controller: SessionController, kind: ResourceKind) -> None:
    cfg = get_cfg()
    spec = spec_for(kind)
    head_l, head_r = st.columns([3, 1])
    with head_l:
        st.subheader(spec.plural)
    with head_r:
        if st.button("🔄 Refresh", key="refresh", disabled=controller.loading, use_container_width=True):
            with st.spinner(f"Loading {spec.plural.lower()}..."):
                run_sync(controller.fetch(kind))
            st.rerun()

    records = controller.records(kind)
    if not records:
        st.info(f"No {spec.plural.lower()} yet.")
        return

    st.dataframe(table_rows(spec, records), hide_index=True, use_container_width=True)

    for r in records:
        c_name, c_edit, c_del = st.columns([4, 1, 1])
        with c_name:
            st.write(r.name)
        with c_edit:
            if st.button("Edit", key=f"edit_{kind.value}_{r.id}", disabled=controller.loading):
                controller.begin_edit(kind, r.id)
                form_set(kind, form_from_record(kind, r))
                st.rerun()
        with c_del:
            if st.button("Delete", key=f"del_{kind.value}_{r.id}", disabled=controller.loading):
                if cfg.confirm_deletes:
                    set_pending_delete(kind, r.id)
                else:
                    run_sync(controller.remove(kind, r.id, confirmed=True))
                st.rerun()


@st.dialog("Confirm delete")
def confirm_delete_dialog(controller: SessionController, kind: ResourceKind, record_id: str) -> None:
    spec = spec_for(kind)
    record = controller.cache.find(kind, record_id)
    name = record.name if record is not None else record_id
    st.warning(f"Delete {spec.label.lower()} '{name}'? This cannot be undone.")
    c1, c2 = st.columns([1, 1])
    with c1:
        if st.button("Cancel", key="delete_cancel"):
            st.rerun()
    with c2:
        if st.button("Delete", type="primary", key="delete_confirm"):
            run_sync(controller.remove(kind, record_id, confirmed=True))
            st.rerun()


def render_form(controller: SessionController, kind: ResourceKind) -> None:
    spec = spec_for(kind)
    editing = controller.edit_session
    form = form_get(kind)

    st.subheader(f"{'Edit' if editing else 'Create'} {spec.label}")
    values = {}
    with st.form(f"form_{kind.value}_{form_generation()}", clear_on_submit=False):
        for f in spec.fields:
            title = spec.column_title(f)
            if f == "gender":
                options = [g.value for g in Gender]
                current = form.get(f) or Gender.MALE.value
                values[f] = st.selectbox(title, options, index=options.index(current) if current in options else 0)
            else:
                values[f] = st.text_input(title, value=form.get(f, ""))
        submitted = st.form_submit_button(
            "Update" if editing else "Create",
            type="primary",
            disabled=controller.loading,
        )

    if editing and st.button("Cancel", key="cancel_edit"):
        controller.cancel_edit()
        form_reset(kind)
        st.rerun()

    if not submitted:
        return

    try:
        payload = payload_from_form(kind, values)
    except FormError as e:
        st.error(str(e))
        return

    with st.spinner("Saving..."):
        if editing:
            ok = run_sync(controller.update(kind, editing.record_id, payload))
        else:
            ok = run_sync(controller.create(kind, payload))
    if ok:
        form_reset(kind)
    else:
        # Keep what the user typed so they can fix and retry.
        form_set(kind, values)
    st.rerun()


def main() -> None:
    cfg = get_cfg()
    set_page(cfg.app_title)
    app_header(cfg.app_title, f"Service: {cfg.api_base_url}")

    controller = get_controller()
    kind = render_tabs(controller)
    render_notification_slot()

    pending = pop_pending_delete()
    if pending:
        confirm_delete_dialog(controller, ResourceKind(pending["kind"]), pending["id"])

    left, right = st.columns([3, 2])
    with left:
        render_list(controller, kind)
    with right:
        render_form(controller, kind)


if __name__ == "__main__":
    main()
