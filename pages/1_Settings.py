import json

import streamlit as st

from app import get_cfg
from zoo_console.config import get_last_loaded_config_path, save_config_yaml, scrub_config_for_display
from zoo_console.logging_utils import init_logging
from zoo_console.state.session import reset_controller
from zoo_console.ui import app_header, set_page


def render_settings() -> None:
    cfg = get_cfg()

    st.markdown("### Service")
    cfg.api_base_url = st.text_input("API base URL", value=cfg.api_base_url).strip()
    cfg.request_timeout_s = int(st.number_input("Request timeout (s)", min_value=1, max_value=300, value=int(cfg.request_timeout_s)))

    st.markdown("### UI")
    cfg.notification_window_s = float(
        st.number_input("Notification display (s)", min_value=1.0, max_value=60.0, value=float(cfg.notification_window_s), step=0.5)
    )
    cfg.confirm_deletes = st.checkbox(
        "Ask for confirmation before deleting",
        value=bool(cfg.confirm_deletes),
        help="When off, the Delete button sends the request immediately.",
    )

    st.markdown("### Logging")
    levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
    cur_level = (cfg.log_level or "INFO").upper()
    cfg.log_level = st.selectbox(
        "Console log level",
        levels,
        index=levels.index(cur_level) if cur_level in levels else 1,
        help="The log file under the data directory always records DEBUG.",
    )

    st.markdown("### Network")
    px = cfg.network.proxy
    modes = ["off", "env", "explicit"]
    cur_mode = (px.mode or "off").lower()
    px.mode = st.selectbox(
        "Proxy mode",
        modes,
        index=modes.index(cur_mode) if cur_mode in modes else 0,
        help="env: use HTTP_PROXY/HTTPS_PROXY/NO_PROXY. explicit: use the URLs below.",
    )
    if px.mode == "explicit":
        px.http = st.text_input("HTTP proxy", value=px.http)
        px.https = st.text_input("HTTPS proxy", value=px.https)
        px.no_proxy = st.text_input("No proxy", value=px.no_proxy)
    tls = cfg.network.tls
    tls.verify = st.checkbox("Verify TLS certificates", value=bool(tls.verify))
    tls.ca_bundle_path = st.text_input("CA bundle path (optional)", value=tls.ca_bundle_path).strip()

    st.markdown("---")
    left, right = st.columns([1, 2])
    with left:
        if st.button("Save settings", type="primary", use_container_width=True):
            p = save_config_yaml(cfg)
            init_logging(cfg.data_dir, level=cfg.log_level)
            # Rebuild the client (base URL, proxy, TLS) on the next run.
            reset_controller()
            st.success(f"Saved to {p}")
    with right:
        st.caption(f"Loaded config: {get_last_loaded_config_path() or '(defaults)'}")

    with st.expander("Current config (session)", expanded=False):
        st.code(json.dumps(scrub_config_for_display(cfg), indent=2, ensure_ascii=False), language="json")


def main():
    cfg = get_cfg()
    set_page(cfg.app_title)
    app_header("Settings")
    render_settings()


if __name__ == "__main__":
    main()
