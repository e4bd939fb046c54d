from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from ..models import RecordBase, ResourceKind


class CollectionCache:
    """Last-known-good snapshot of each kind's records, in server order.

    Entries are only ever replaced wholesale; nothing here merges.
    """

    def __init__(self) -> None:
        self._records: Dict[ResourceKind, List[RecordBase]] = {k: [] for k in ResourceKind}

    def replace(self, kind: ResourceKind, records: Iterable[RecordBase]) -> None:
        self._records[ResourceKind(kind)] = list(records)

    def read(self, kind: ResourceKind) -> List[RecordBase]:
        # Copy so callers cannot mutate the cache behind the controller's back.
        return list(self._records[ResourceKind(kind)])

    def find(self, kind: ResourceKind, record_id: str) -> Optional[RecordBase]:
        for r in self._records[ResourceKind(kind)]:
            if r.id == record_id:
                return r
        return None
