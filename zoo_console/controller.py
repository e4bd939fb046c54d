"""Session controller: the single writer of console state.

Owns the active kind, the collection caches, the one edit session, the
per-kind in-flight counters and the notification slot. Remote calls are
awaited; their outcome is applied to the kind the call was made for, never to
whatever kind happens to be active when the response lands.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Protocol

from .errors import PreconditionViolation, ServiceRejection, TransportFailure
from .logging_utils import get_logger
from .models import RecordBase, ResourceKind
from .resources import spec_for
from .state.collection_cache import CollectionCache
from .state.notifications import Notification, NotificationSlot

log = get_logger("controller")


class RecordService(Protocol):
    async def alist_records(self, kind: ResourceKind) -> List[RecordBase]: ...

    async def acreate_record(self, kind: ResourceKind, payload: Dict[str, Any]) -> Any: ...

    async def aupdate_record(self, kind: ResourceKind, record_id: str, payload: Dict[str, Any]) -> Any: ...

    async def adelete_record(self, kind: ResourceKind, record_id: str) -> Any: ...


@dataclass(frozen=True)
class EditSession:
    kind: ResourceKind
    record_id: str


@dataclass
class ConsoleState:
    active_kind: ResourceKind = ResourceKind.PERSON
    cache: CollectionCache = field(default_factory=CollectionCache)
    edit_session: Optional[EditSession] = None
    notifications: NotificationSlot = field(default_factory=NotificationSlot)
    in_flight: Dict[ResourceKind, int] = field(default_factory=lambda: {k: 0 for k in ResourceKind})
    # Bumped on every fetch dispatch; a completion only applies if it is still the latest.
    fetch_seq: Dict[ResourceKind, int] = field(default_factory=lambda: {k: 0 for k in ResourceKind})


def _failure_text(err: Exception, fallback: str) -> str:
    if isinstance(err, ServiceRejection) and err.message:
        return err.message
    return fallback


class SessionController:
    def __init__(self, service: RecordService, state: ConsoleState | None = None):
        self.service = service
        self.state = state or ConsoleState()

    # -------- Read access --------
    @property
    def active_kind(self) -> ResourceKind:
        return self.state.active_kind

    @property
    def cache(self) -> CollectionCache:
        return self.state.cache

    def records(self, kind: ResourceKind | None = None) -> List[RecordBase]:
        return self.state.cache.read(kind or self.state.active_kind)

    @property
    def edit_session(self) -> Optional[EditSession]:
        return self.state.edit_session

    @property
    def notification(self) -> Optional[Notification]:
        return self.state.notifications.current

    def loading_for(self, kind: ResourceKind) -> bool:
        return self.state.in_flight[ResourceKind(kind)] > 0

    @property
    def loading(self) -> bool:
        return self.loading_for(self.state.active_kind)

    @contextmanager
    def _in_flight(self, kind: ResourceKind) -> Iterator[None]:
        self.state.in_flight[kind] += 1
        try:
            yield
        finally:
            self.state.in_flight[kind] -= 1

    # -------- Selection --------
    async def select(self, kind: ResourceKind) -> bool:
        """Make `kind` active and (re)load it. Any edit session is dropped first."""
        kind = ResourceKind(kind)
        if self.state.edit_session is not None:
            log.debug("Dropping edit session %s on select(%s)", self.state.edit_session, kind.value)
        self.state.edit_session = None
        self.state.active_kind = kind
        return await self.fetch(kind)

    async def fetch(self, kind: ResourceKind) -> bool:
        kind = ResourceKind(kind)
        spec = spec_for(kind)
        self.state.fetch_seq[kind] += 1
        seq = self.state.fetch_seq[kind]

        with self._in_flight(kind):
            try:
                records = await self.service.alist_records(kind)
            except (TransportFailure, ServiceRejection) as e:
                if seq != self.state.fetch_seq[kind]:
                    log.debug("Ignoring superseded failed fetch of %s: %s", kind.value, e)
                    return False
                log.warning("Fetch %s failed: %s", kind.value, e)
                self.state.notifications.error(f"Failed to load {spec.plural.lower()}")
                return False

            if seq != self.state.fetch_seq[kind]:
                log.debug("Ignoring superseded fetch of %s (seq=%s, latest=%s)", kind.value, seq, self.state.fetch_seq[kind])
                return False
            self.state.cache.replace(kind, records)
            log.info("Loaded %d %s", len(records), spec.plural.lower())
        return True

    # -------- Mutations --------
    async def create(self, kind: ResourceKind, payload: Dict[str, Any]) -> bool:
        kind = ResourceKind(kind)
        spec = spec_for(kind)
        with self._in_flight(kind):
            try:
                await self.service.acreate_record(kind, payload)
            except (TransportFailure, ServiceRejection) as e:
                log.warning("Create %s failed: %s", kind.value, e)
                self.state.notifications.error(_failure_text(e, "Failed to create"))
                return False
            self.state.notifications.success(f"{spec.label} created successfully")
            # The new id is only known to the service; re-fetch to learn it.
            await self.fetch(kind)
        return True

    async def update(self, kind: ResourceKind, record_id: str, payload: Dict[str, Any]) -> bool:
        kind = ResourceKind(kind)
        if not record_id:
            raise PreconditionViolation("update() needs the id of an existing record")
        spec = spec_for(kind)
        with self._in_flight(kind):
            try:
                await self.service.aupdate_record(kind, record_id, payload)
            except (TransportFailure, ServiceRejection) as e:
                log.warning("Update %s/%s failed: %s", kind.value, record_id, e)
                self.state.notifications.error(_failure_text(e, "Failed to update"))
                return False
            self.state.notifications.success(f"{spec.label} updated successfully")
            self.state.edit_session = None
            await self.fetch(kind)
        return True

    async def remove(self, kind: ResourceKind, record_id: str, *, confirmed: bool = False) -> bool:
        kind = ResourceKind(kind)
        if not confirmed:
            raise PreconditionViolation("remove() called without user confirmation")
        if not record_id:
            raise PreconditionViolation("remove() needs the id of an existing record")
        spec = spec_for(kind)
        with self._in_flight(kind):
            try:
                await self.service.adelete_record(kind, record_id)
            except (TransportFailure, ServiceRejection) as e:
                log.warning("Delete %s/%s failed: %s", kind.value, record_id, e)
                self.state.notifications.error(_failure_text(e, "Failed to delete"))
                return False
            self.state.notifications.success(f"{spec.label} deleted successfully")
            await self.fetch(kind)
        return True

    # -------- Edit session --------
    def begin_edit(self, kind: ResourceKind, record_id: str) -> EditSession:
        kind = ResourceKind(kind)
        if kind != self.state.active_kind:
            raise PreconditionViolation(
                f"Cannot edit a {kind.value} while {self.state.active_kind.value} is active"
            )
        if not record_id:
            raise PreconditionViolation("begin_edit() needs a record id")
        self.state.edit_session = EditSession(kind=kind, record_id=str(record_id))
        return self.state.edit_session

    def cancel_edit(self) -> None:
        self.state.edit_session = None
