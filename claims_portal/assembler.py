from datetime import date, datetime
from typing import Any, Dict, List, Mapping

from .constants import FILE_CATEGORIES
from .rules import ClaimValidationError, FieldError, validate_submission

BOOLEAN_FIELDS = (
    "has_building_damage",
    "has_theft",
    "theft_police_reported",
    "is_investment_property",
)

OPTIONAL_STRING_FIELDS = (
    "property_block",
    "property_unit",
    "property_place_id",
    "property_construction_age",
    "property_construction_type",
)


class SubmissionRejected(ClaimValidationError):
    """Final check failed; ``step`` is where the claimant should be sent back to."""

    def __init__(self, errors: List[FieldError], step: int):
        super().__init__(errors)
        self._step = step

    @property
    def step(self) -> int:
        return self._step


def _gated(value: Any, gate: bool) -> str:
    if not gate:
        return ""
    return value if isinstance(value, str) else ""


def _iso_date(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def assemble_submission(answers: Mapping[str, Any]) -> Dict[str, Any]:
    """Turn accumulated form answers into a complete, JSON-ready submission.

    Unvisited yes/no questions default to ``False``, every file list is
    present, and text that belongs to a "no" answer is blanked so stale input
    from an earlier "yes" is never submitted. The result is re-validated as a
    whole; answers changed on an earlier step can invalidate a later one, in
    which case ``SubmissionRejected`` names the earliest offending step.
    """
    payload: Dict[str, Any] = dict(answers)

    # Only unanswered flags are defaulted; any other non-boolean reaches validation and is rejected
    for name in BOOLEAN_FIELDS:
        if payload.get(name) is None:
            payload[name] = False

    has_damage = payload["has_building_damage"] is True
    has_theft = payload["has_theft"] is True
    if payload["has_theft"] is False and isinstance(payload["theft_police_reported"], bool):
        payload["theft_police_reported"] = False
    reported = has_theft and payload["theft_police_reported"] is True
    investment = payload["is_investment_property"] is True

    payload["building_damage_description"] = _gated(payload.get("building_damage_description"), has_damage)
    payload["building_damage_affected_areas"] = _gated(payload.get("building_damage_affected_areas"), has_damage)
    payload["theft_description"] = _gated(payload.get("theft_description"), has_theft)
    payload["theft_police_reference"] = _gated(payload.get("theft_police_reference"), reported)
    payload["tenant_name"] = _gated(payload.get("tenant_name"), investment)
    payload["tenant_phone"] = _gated(payload.get("tenant_phone"), investment)
    payload["tenant_email"] = _gated(payload.get("tenant_email"), investment)

    for name in FILE_CATEGORIES:
        value = payload.get(name)
        if value is None:
            payload[name] = []
        elif isinstance(value, tuple):
            payload[name] = list(value)

    for name in OPTIONAL_STRING_FIELDS:
        payload.setdefault(name, None)

    payload["incident_date"] = _iso_date(payload.get("incident_date"))

    try:
        submission = validate_submission(payload)
    except ClaimValidationError as e:
        raise SubmissionRejected(e.errors, e.step)

    return submission.model_dump(mode="json")
