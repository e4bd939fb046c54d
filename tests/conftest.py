"""Shared fixtures: an in-memory record service and a hand-cranked clock."""

import asyncio
import copy
import itertools
from typing import Any, Dict, List, Optional

import pytest

from zoo_console.controller import ConsoleState, SessionController
from zoo_console.errors import ServiceRejection
from zoo_console.models import ResourceKind
from zoo_console.resources import parse_records
from zoo_console.state.notifications import NotificationSlot


class FakeClock:
    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRecordService:
    """In-memory stand-in for ZooApiClient's async surface.

    `fail_next[op]` makes the next call of that op raise the given exception.
    `gates` lets a test hold list calls open until it sets an event.
    """

    def __init__(self, rows: Optional[Dict[ResourceKind, List[Dict[str, Any]]]] = None):
        self.rows: Dict[ResourceKind, List[Dict[str, Any]]] = {k: [] for k in ResourceKind}
        for k, v in (rows or {}).items():
            self.rows[k] = copy.deepcopy(v)
        self.calls: List[tuple] = []
        self.fail_next: Dict[str, Exception] = {}
        self.gates: List[asyncio.Event] = []
        self.required: Dict[str, str] = {"name": "name required"}
        self._ids = itertools.count(1)

    def _maybe_fail(self, op: str) -> None:
        err = self.fail_next.pop(op, None)
        if err is not None:
            raise err

    async def alist_records(self, kind):
        self.calls.append(("list", kind))
        snapshot = copy.deepcopy(self.rows[kind])
        if self.gates:
            await self.gates.pop(0).wait()
        self._maybe_fail("list")
        return parse_records(kind, snapshot)

    async def acreate_record(self, kind, payload):
        self.calls.append(("create", kind, dict(payload)))
        self._maybe_fail("create")
        for field, message in self.required.items():
            if not payload.get(field):
                raise ServiceRejection(400, message)
        row = {"id": f"{kind.value[0].lower()}-new{next(self._ids)}", **payload}
        self.rows[kind].append(row)
        return row

    async def aupdate_record(self, kind, record_id, payload):
        self.calls.append(("update", kind, record_id, dict(payload)))
        self._maybe_fail("update")
        for row in self.rows[kind]:
            if row["id"] == record_id:
                row.update(payload)
                return row
        raise ServiceRejection(404, f"{kind.value} not found")

    async def adelete_record(self, kind, record_id):
        self.calls.append(("delete", kind, record_id))
        self._maybe_fail("delete")
        before = len(self.rows[kind])
        self.rows[kind] = [r for r in self.rows[kind] if r["id"] != record_id]
        if len(self.rows[kind]) == before:
            raise ServiceRejection(404, f"{kind.value} not found")
        return None

    def ops(self) -> List[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service():
    return FakeRecordService(
        {
            ResourceKind.PERSON: [
                {"id": "p1", "name": "Ana", "email": "ana@zoo.test"},
                {"id": "p2", "name": "Luis", "email": "luis@zoo.test"},
            ],
            ResourceKind.ENCLOSURE: [
                {"id": "e1", "type": "Savanna", "capacity": 12, "location": "North", "name": "Plains"},
            ],
        }
    )


@pytest.fixture
def controller(service, clock):
    state = ConsoleState(notifications=NotificationSlot(window_s=3.0, clock=clock))
    return SessionController(service, state)
