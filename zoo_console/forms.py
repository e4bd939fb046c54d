"""Form glue: string-valued form dicts <-> typed request payloads."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from .errors import FormError
from .models import RecordBase, ResourceKind
from .resources import spec_for


def blank_form(kind: ResourceKind) -> Dict[str, str]:
    spec = spec_for(kind)
    return {f: spec.form_defaults.get(f, "") for f in spec.fields}


def form_from_record(kind: ResourceKind, record: RecordBase) -> Dict[str, str]:
    """Prefill a form from a cached record (numbers and enums become text)."""
    spec = spec_for(kind)
    dumped = record.model_dump(by_alias=True, mode="json")
    return {f: "" if dumped.get(f) is None else str(dumped.get(f)) for f in spec.fields}


def payload_from_form(kind: ResourceKind, form: Mapping[str, Any]) -> Dict[str, Any]:
    """Shape a form into a payload.

    Text is stripped and numeric fields are parsed to int. Only presence is
    checked here; range checks are the service's job.
    """
    spec = spec_for(kind)
    payload: Dict[str, Any] = {}
    missing: List[str] = []
    for f in spec.fields:
        raw = form.get(f)
        value = "" if raw is None else str(raw).strip()
        if not value:
            missing.append(f)
            continue
        payload[f] = value

    if missing:
        names = ", ".join(spec.column_title(f) for f in missing)
        raise FormError(f"Required: {names}", fields=missing)

    for f in spec.numeric_fields:
        try:
            payload[f] = int(payload[f])
        except ValueError:
            raise FormError(f"{spec.column_title(f)} must be a whole number", fields=[f]) from None
    return payload
