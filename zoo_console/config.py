from __future__ import annotations

import copy
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml


# Keep track of which config.yaml was actually loaded. Handy when the console
# keeps talking to the wrong service.
_LAST_LOADED_CONFIG_PATH: str | None = None


def _set_last_loaded_config_path(p: Path | None) -> None:
    global _LAST_LOADED_CONFIG_PATH
    _LAST_LOADED_CONFIG_PATH = str(p) if p is not None else None


def get_last_loaded_config_path() -> str | None:
    return _LAST_LOADED_CONFIG_PATH


@dataclass
class NetworkProxyConfig:
    mode: str = "off"      # off | env | explicit
    http: str = ""
    https: str = ""
    no_proxy: str = ""


@dataclass
class NetworkTLSConfig:
    verify: bool = True
    ca_bundle_path: str = ""


@dataclass
class NetworkConfig:
    proxy: NetworkProxyConfig = field(default_factory=NetworkProxyConfig)
    tls: NetworkTLSConfig = field(default_factory=NetworkTLSConfig)


@dataclass
class AppConfig:
    # Remote service
    api_base_url: str = "http://localhost:3000/api"
    request_timeout_s: int = 15
    # Optional per-kind collection path overrides, e.g. {"Person": "users"}
    resource_paths: Dict[str, str] = field(default_factory=dict)

    # Network egress (proxy + TLS)
    network: NetworkConfig = field(default_factory=NetworkConfig)

    # UI
    app_title: str = "Zoo Console"
    notification_window_s: float = 3.0
    # Ask before sending a DELETE. Turning this off auto-confirms deletes.
    confirm_deletes: bool = True

    # Storage (log file lives here)
    data_dir: str = "data"
    # Console log level; the log file always records DEBUG.
    log_level: str = "INFO"


_OVERRIDE_KEYS = (
    "api_base_url",
    "request_timeout_s",
    "resource_paths",
    "app_title",
    "notification_window_s",
    "confirm_deletes",
    "data_dir",
    "log_level",
)

_ENV_OVERRIDES = {
    "ZOO_CONSOLE_API_BASE_URL": "api_base_url",
    "ZOO_CONSOLE_DATA_DIR": "data_dir",
    "ZOO_CONSOLE_LOG_LEVEL": "log_level",
}


def get_persisted_config_path(data_dir: str | None = None) -> Path:
    """Return the config path.

    ZOO_CONSOLE_CONFIG wins; otherwise the file lives under the data directory.
    """
    explicit = (os.environ.get("ZOO_CONSOLE_CONFIG") or "").strip()
    if explicit:
        return Path(explicit)
    d = (data_dir or os.environ.get("ZOO_CONSOLE_DATA_DIR") or "data").strip() or "data"
    return Path(d) / "config.yaml"


def load_config_yaml(path: str | None = None) -> Dict[str, Any]:
    """Load a YAML config file as a dict.

    A missing file is not an error: the console runs on defaults.
    """
    p = Path(path) if path else get_persisted_config_path()
    if not p.exists():
        _set_last_loaded_config_path(None)
        return {}
    _set_last_loaded_config_path(p.resolve())
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    return data if isinstance(data, dict) else {}


def apply_config_overrides(cfg: AppConfig, overrides: Dict[str, Any]) -> AppConfig:
    """Apply known config.yaml keys onto an AppConfig instance."""
    if not overrides:
        return cfg

    n = overrides.get("network") or {}
    if isinstance(n, dict):
        px = n.get("proxy") or {}
        if isinstance(px, dict):
            cfg.network.proxy.mode = str(px.get("mode", cfg.network.proxy.mode) or "off").strip().lower()
            for k in ("http", "https", "no_proxy"):
                if k in px:
                    setattr(cfg.network.proxy, k, str(px.get(k) or ""))
        tls = n.get("tls") or {}
        if isinstance(tls, dict):
            if "verify" in tls:
                cfg.network.tls.verify = bool(tls.get("verify"))
            if "ca_bundle_path" in tls:
                cfg.network.tls.ca_bundle_path = str(tls.get("ca_bundle_path") or "")

    for key in _OVERRIDE_KEYS:
        if key in overrides:
            setattr(cfg, key, overrides[key])

    cfg.request_timeout_s = int(cfg.request_timeout_s)
    cfg.notification_window_s = float(cfg.notification_window_s)
    cfg.resource_paths = dict(cfg.resource_paths or {})
    cfg.log_level = str(cfg.log_level or "INFO").strip().upper()
    return cfg


def apply_env_overrides(cfg: AppConfig) -> AppConfig:
    # Env vars win over config.yaml.
    for env, key in _ENV_OVERRIDES.items():
        v = (os.environ.get(env) or "").strip()
        if v:
            setattr(cfg, key, v)
    return cfg


def load_app_config(path: str | None = None) -> AppConfig:
    cfg = apply_config_overrides(AppConfig(), load_config_yaml(path))
    return apply_env_overrides(cfg)


def _config_to_dict(cfg: AppConfig) -> Dict[str, Any]:
    out: Dict[str, Any] = {k: getattr(cfg, k) for k in _OVERRIDE_KEYS}
    out["network"] = {
        "proxy": {
            "mode": cfg.network.proxy.mode,
            "http": cfg.network.proxy.http,
            "https": cfg.network.proxy.https,
            "no_proxy": cfg.network.proxy.no_proxy,
        },
        "tls": {
            "verify": bool(cfg.network.tls.verify),
            "ca_bundle_path": cfg.network.tls.ca_bundle_path,
        },
    }
    return out


def save_config_yaml(cfg: AppConfig, path: str | None = None) -> Path:
    """Persist current settings.

    Merges onto the existing file so keys the UI does not expose survive.
    """
    p = Path(path) if path else get_persisted_config_path(cfg.data_dir)
    p.parent.mkdir(parents=True, exist_ok=True)

    existing: Dict[str, Any] = {}
    if p.exists():
        loaded = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        existing = loaded if isinstance(loaded, dict) else {}

    merged = dict(existing)
    merged.update(_config_to_dict(cfg))

    # Atomic write: write tmp then replace.
    tmp = p.with_suffix(".yaml.tmp")
    tmp.write_text(yaml.safe_dump(merged, sort_keys=False, allow_unicode=True), encoding="utf-8")
    tmp.replace(p)
    _set_last_loaded_config_path(p.resolve())
    return p


def scrub_proxy_url(url: str) -> str:
    """Remove credentials from a proxy URL for safe logging/UI."""
    u = (url or "").strip()
    return re.sub(r"^(https?://)([^/@:]+):([^/@]+)@", r"\1***:***@", u, flags=re.I)


def scrub_config_for_display(cfg: AppConfig) -> Dict[str, Any]:
    """Dict copy of the config with proxy credentials masked."""
    d = copy.deepcopy(_config_to_dict(cfg))
    px = d["network"]["proxy"]
    for k in ("http", "https"):
        if px.get(k):
            px[k] = scrub_proxy_url(px[k])
    return d
