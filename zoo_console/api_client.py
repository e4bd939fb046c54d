"""HTTP client for the zoo-management REST service.

One collection path per kind (GET/POST on the collection, PUT/DELETE on
`<collection>/<id>`). Transport problems raise TransportFailure; non-success
statuses raise ServiceRejection carrying the server's `message` when it sent
one. The async wrappers push the blocking `requests` call onto a worker thread
so the event loop stays free while a call is outstanding.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from .config import AppConfig, scrub_proxy_url
from .errors import ServiceRejection, TransportFailure
from .logging_utils import get_logger
from .models import RecordBase, ResourceKind
from .resources import parse_records, paths_from_config, spec_for

log = get_logger("api")


def build_requests_session(cfg: AppConfig | None = None) -> requests.Session:
    """Return a requests.Session configured for proxy + TLS."""
    s = requests.Session()
    s.headers.update({"Accept": "application/json"})
    if cfg is None:
        return s

    px = cfg.network.proxy
    tls = cfg.network.tls

    ca = (tls.ca_bundle_path or "").strip()
    s.verify = ca if ca else bool(tls.verify)

    mode = (px.mode or "off").strip().lower()
    # Only trust environment proxies when explicitly requested.
    s.trust_env = mode == "env"
    if mode == "explicit":
        if px.http:
            s.proxies["http"] = px.http.strip()
        if px.https:
            s.proxies["https"] = px.https.strip()
        if px.no_proxy:
            s.proxies["no_proxy"] = px.no_proxy.strip()

    log.info(
        "HTTP session configured: proxy_mode=%s http_proxy=%s https_proxy=%s tls_verify=%s",
        mode,
        scrub_proxy_url(s.proxies.get("http", "")) or "(none)",
        scrub_proxy_url(s.proxies.get("https", "")) or "(none)",
        str(s.verify),
    )
    return s


def _error_message(resp: requests.Response) -> Optional[str]:
    """Pull a human-readable `message` out of an error body, if there is one."""
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        msg = body.get("message")
        if isinstance(msg, str) and msg.strip():
            return msg.strip()
    return None


class ZooApiClient:
    def __init__(
        self,
        base_url: str,
        timeout_s: float = 15,
        session: requests.Session | None = None,
        paths: Dict[ResourceKind, str] | None = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout_s = timeout_s
        self.session = session or requests.Session()
        # Per-client collection path overrides; kinds not listed use the default.
        self.paths: Dict[ResourceKind, str] = dict(paths or {})

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "ZooApiClient":
        return cls(
            cfg.api_base_url,
            timeout_s=cfg.request_timeout_s,
            session=build_requests_session(cfg),
            paths=paths_from_config(cfg.resource_paths),
        )

    def url_for(self, kind: ResourceKind, record_id: str | None = None) -> str:
        kind = ResourceKind(kind)
        path = self.paths.get(kind) or spec_for(kind).path
        url = f"{self.base_url}/{path}"
        if record_id is not None:
            url += "/" + quote(str(record_id), safe="")
        return url

    def _request(
        self,
        method: str,
        kind: ResourceKind,
        record_id: str | None = None,
        payload: Dict[str, Any] | None = None,
        *,
        require_body: bool = False,
    ) -> Any:
        url = self.url_for(kind, record_id)
        try:
            resp = self.session.request(method, url, json=payload, timeout=self.timeout_s)
        except requests.RequestException as e:
            log.warning("%s %s failed: %s", method, url, e)
            raise TransportFailure(f"Request failed: {e}") from e

        if not resp.ok:
            message = _error_message(resp)
            log.warning("%s %s -> HTTP %s (%s)", method, url, resp.status_code, message or "no message")
            raise ServiceRejection(resp.status_code, message)

        log.debug("%s %s -> HTTP %s", method, url, resp.status_code)
        if not resp.content:
            if require_body:
                raise TransportFailure(f"Empty response body from {method} {url}")
            return None
        try:
            return resp.json()
        except ValueError as e:
            if require_body:
                raise TransportFailure(f"Response from {method} {url} is not JSON") from e
            # Mutations are followed by a re-fetch, so an odd body is harmless.
            return None

    # -------- Sync API --------
    def list_records(self, kind: ResourceKind) -> List[RecordBase]:
        rows = self._request("GET", kind, require_body=True)
        return parse_records(kind, rows)

    def create_record(self, kind: ResourceKind, payload: Dict[str, Any]) -> Any:
        body = {k: v for k, v in payload.items() if k != "id"}
        return self._request("POST", kind, payload=body)

    def update_record(self, kind: ResourceKind, record_id: str, payload: Dict[str, Any]) -> Any:
        body = {k: v for k, v in payload.items() if k != "id"}
        return self._request("PUT", kind, record_id, payload=body)

    def delete_record(self, kind: ResourceKind, record_id: str) -> Any:
        return self._request("DELETE", kind, record_id)

    # -------- Async API --------
    async def alist_records(self, kind: ResourceKind) -> List[RecordBase]:
        return await asyncio.to_thread(self.list_records, kind)

    async def acreate_record(self, kind: ResourceKind, payload: Dict[str, Any]) -> Any:
        return await asyncio.to_thread(self.create_record, kind, payload)

    async def aupdate_record(self, kind: ResourceKind, record_id: str, payload: Dict[str, Any]) -> Any:
        return await asyncio.to_thread(self.update_record, kind, record_id, payload)

    async def adelete_record(self, kind: ResourceKind, record_id: str) -> Any:
        return await asyncio.to_thread(self.delete_record, kind, record_id)
