"""Per-kind resource table.

Everything the controller, the API client and the forms need to know about a
kind lives here, so none of them branch on the kind themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from pydantic import ValidationError

from .errors import TransportFailure
from .logging_utils import get_logger
from .models import (
    Enclosure,
    Gender,
    Person,
    RecordBase,
    ResourceKind,
    Specialist,
    TrackedAnimal,
)

log = get_logger("resources")


@dataclass(frozen=True)
class ResourceSpec:
    kind: ResourceKind
    path: str
    label: str
    plural: str
    model: Type[RecordBase]
    # Wire names, in form/table order.
    fields: Tuple[str, ...]
    numeric_fields: Tuple[str, ...] = ()
    form_defaults: Dict[str, str] = field(default_factory=dict)
    column_titles: Dict[str, str] = field(default_factory=dict)

    @property
    def required_fields(self) -> Tuple[str, ...]:
        # Every payload field is required on these forms.
        return self.fields

    def column_title(self, name: str) -> str:
        return self.column_titles.get(name) or name.capitalize()


_SPECS: Dict[ResourceKind, ResourceSpec] = {
    ResourceKind.PERSON: ResourceSpec(
        kind=ResourceKind.PERSON,
        path="people",
        label="Person",
        plural="People",
        model=Person,
        fields=("name", "email"),
    ),
    ResourceKind.SPECIALIST: ResourceSpec(
        kind=ResourceKind.SPECIALIST,
        path="specialists",
        label="Specialist",
        plural="Specialists",
        model=Specialist,
        fields=("name", "email", "specialization", "yearsOfExperience"),
        numeric_fields=("yearsOfExperience",),
        column_titles={"yearsOfExperience": "Years of Experience"},
    ),
    ResourceKind.ENCLOSURE: ResourceSpec(
        kind=ResourceKind.ENCLOSURE,
        path="enclosures",
        label="Enclosure",
        plural="Enclosures",
        model=Enclosure,
        fields=("name", "type", "capacity", "location"),
        numeric_fields=("capacity",),
    ),
    ResourceKind.TRACKED_ANIMAL: ResourceSpec(
        kind=ResourceKind.TRACKED_ANIMAL,
        path="tracked-animals",
        label="Tracked Animal",
        plural="Tracked Animals",
        model=TrackedAnimal,
        fields=("name", "species", "age", "gender"),
        numeric_fields=("age",),
        form_defaults={"gender": Gender.MALE.value},
    ),
}


def spec_for(kind: ResourceKind) -> ResourceSpec:
    return _SPECS[ResourceKind(kind)]


def all_specs() -> List[ResourceSpec]:
    return [_SPECS[k] for k in ResourceKind]


def paths_from_config(overrides: Optional[Mapping[str, str]]) -> Dict[ResourceKind, str]:
    """Map config `resource_paths` (kind name -> path) onto kinds.

    Unknown kind names and blank paths are logged and skipped.
    """
    out: Dict[ResourceKind, str] = {}
    for k, v in (overrides or {}).items():
        try:
            kind = ResourceKind(k)
        except ValueError:
            log.warning("Ignoring resource_paths entry for unknown kind %r", k)
            continue
        path = str(v or "").strip().strip("/")
        if not path:
            log.warning("Ignoring blank resource_paths entry for %s", kind.value)
            continue
        out[kind] = path
    return out


def parse_records(kind: ResourceKind, rows: Any) -> List[RecordBase]:
    """Validate a raw JSON array from the service into record models.

    A body that is not a list, or a row missing a key (or carrying one of the
    wrong type), is a protocol failure for the whole response. Values are not
    range-checked here; whatever the service stored is shown.
    """
    spec = spec_for(kind)
    if not isinstance(rows, list):
        raise TransportFailure(f"Expected a list of {spec.plural.lower()}, got {type(rows).__name__}")
    try:
        return [spec.model.model_validate(r) for r in rows]
    except ValidationError as e:
        raise TransportFailure(f"Malformed {spec.label.lower()} record: {e.error_count()} validation error(s)") from e
