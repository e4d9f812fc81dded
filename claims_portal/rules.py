"""Validation of claim-form answers.

Shape checks come from the per-step Pydantic models in
``claims_portal.schemas.steps``. Conditional requirements are declared in
``CONDITIONAL_RULES``: each one is evaluated only when every gate flag is
``True``, so an answer of "no" never makes a dependent field mandatory.

Both the per-step check used while filling in the form and the final
submission check run through the same rule table.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, EmailStr, TypeAdapter, ValidationError

from . import constants
from .schemas.steps import FIELD_STEPS, STEP_MODELS, ClaimSubmission


@dataclass(frozen=True)
class FieldError:
    path: str
    message: str
    step: int

    def to_dict(self) -> dict:
        return {"path": self.path, "message": self.message, "step": self.step}


class ClaimValidationError(Exception):
    def __init__(self, errors: List[FieldError]):
        self.errors = errors
        super().__init__("Validation failed: " + ", ".join(e.path for e in errors))

    @property
    def step(self) -> int:
        """Earliest step owning a failing field."""
        return min(e.step for e in self.errors)

    @property
    def paths(self) -> List[str]:
        return [e.path for e in self.errors]


def step_for_field(name: str) -> int:
    try:
        return FIELD_STEPS[name]
    except KeyError:
        raise KeyError(f"Unknown claim field: {name}")


_email_adapter = TypeAdapter(EmailStr)


def min_length(n: int) -> Callable[[Any], bool]:
    return lambda value: isinstance(value, str) and len(value.strip()) >= n


def min_items(n: int) -> Callable[[Any], bool]:
    return lambda value: isinstance(value, (list, tuple)) and len(value) >= n


def valid_email(value: Any) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        _email_adapter.validate_python(value.strip())
    except ValidationError:
        return False
    return True


@dataclass(frozen=True)
class ConditionalRule:
    gates: Tuple[str, ...]
    field: str
    check: Callable[[Any], bool]
    message: str

    @property
    def step(self) -> int:
        return step_for_field(self.field)

    def applies(self, values: Mapping[str, Any]) -> bool:
        return all(values.get(gate) is True for gate in self.gates)

    def evaluate(self, values: Mapping[str, Any]) -> Optional[FieldError]:
        if not self.applies(values):
            return None
        if self.check(values.get(self.field)):
            return None
        return FieldError(self.field, self.message, self.step)


CONDITIONAL_RULES: Tuple[ConditionalRule, ...] = (
    ConditionalRule(
        ("has_building_damage",),
        "building_damage_description",
        min_length(constants.BUILDING_DAMAGE_DESCRIPTION_MIN),
        f"Building damage description is required (minimum {constants.BUILDING_DAMAGE_DESCRIPTION_MIN} characters)",
    ),
    ConditionalRule(
        ("has_building_damage",),
        "damage_photos",
        min_items(constants.DAMAGE_PHOTOS_MIN),
        f"Building damage claims require at least {constants.DAMAGE_PHOTOS_MIN} damage photos",
    ),
    ConditionalRule(
        ("has_building_damage",),
        "repair_quotes",
        min_items(constants.REPAIR_QUOTES_MIN),
        f"Building damage claims require at least {constants.REPAIR_QUOTES_MIN} repair quote",
    ),
    ConditionalRule(
        ("has_theft",),
        "theft_description",
        min_length(constants.THEFT_DESCRIPTION_MIN),
        f"Theft description is required (minimum {constants.THEFT_DESCRIPTION_MIN} characters)",
    ),
    ConditionalRule(
        ("has_theft", "theft_police_reported"),
        "theft_police_reference",
        min_length(constants.POLICE_REFERENCE_MIN),
        "Police reference number is required for reported theft",
    ),
    ConditionalRule(
        ("has_theft", "theft_police_reported"),
        "police_reports",
        min_items(constants.POLICE_REPORTS_MIN),
        "Police reports are required when theft or vandalism is reported to police",
    ),
    ConditionalRule(
        ("is_investment_property",),
        "tenant_name",
        min_length(constants.TENANT_NAME_MIN),
        "Tenant name is required for investment properties",
    ),
    ConditionalRule(
        ("is_investment_property",),
        "tenant_phone",
        min_length(constants.PHONE_MIN),
        "Tenant phone number is required for investment properties",
    ),
    ConditionalRule(
        ("is_investment_property",),
        "tenant_email",
        valid_email,
        "Valid tenant email is required for investment properties",
    ),
    ConditionalRule(
        ("is_investment_property",),
        "tenancy_agreements",
        min_items(constants.TENANCY_AGREEMENTS_MIN),
        f"Investment properties require at least {constants.TENANCY_AGREEMENTS_MIN} tenancy agreement",
    ),
)


FIELD_MESSAGES = {
    "claimant_name": f"Name must be at least {constants.CLAIMANT_NAME_MIN} characters",
    "claimant_email": "Invalid email address",
    "claimant_phone": f"Phone number must be at least {constants.PHONE_MIN} characters",
    "property_address": f"Property address must be at least {constants.PROPERTY_ADDRESS_MIN} characters",
    "incident_date": "Please select the date of the incident",
    "incident_type": "Please select the type of incident",
    "incident_description": f"Description must be at least {constants.INCIDENT_DESCRIPTION_MIN} characters",
    "has_building_damage": "Please answer yes or no",
    "has_theft": "Please answer yes or no",
    "theft_police_reported": "Please answer yes or no",
    "is_investment_property": "Please answer yes or no",
    "signature_data": "Signature is required",
    "signature_type": "Signature type must be drawn, typed or uploaded",
    "declaration_accepted": "You must accept the declaration",
    "fraud_warning_accepted": "You must acknowledge the fraud warning",
    "contents_exclusion_accepted": "You must acknowledge the contents exclusion",
}


def _field_errors(exc: ValidationError) -> List[FieldError]:
    errors = []
    seen = set()
    for err in exc.errors():
        loc = [str(part) for part in err["loc"]]
        if not loc:
            continue
        field = loc[0]
        path = ".".join(loc)
        if path in seen or field not in FIELD_STEPS:
            continue
        seen.add(path)
        message = FIELD_MESSAGES.get(field, err["msg"])
        errors.append(FieldError(path, message, FIELD_STEPS[field]))
    return errors


def _rule_errors(values: Mapping[str, Any], steps: Optional[set] = None) -> List[FieldError]:
    errors = []
    for rule in CONDITIONAL_RULES:
        if steps is not None and rule.step not in steps:
            continue
        error = rule.evaluate(values)
        if error:
            errors.append(error)
    return errors


def _validate(model_cls, data: Mapping[str, Any], context: Mapping[str, Any], steps: Optional[set]):
    errors: List[FieldError] = []
    model: Optional[BaseModel] = None
    try:
        model = model_cls.model_validate(dict(data))
    except ValidationError as e:
        errors.extend(_field_errors(e))

    values: Dict[str, Any] = dict(context)
    values.update(model.model_dump() if model is not None else data)

    failed = {e.path for e in errors}
    errors.extend(e for e in _rule_errors(values, steps) if e.path not in failed)

    if errors:
        raise ClaimValidationError(sorted(errors, key=lambda e: e.step))
    return model


def validate_step(step: int, data: Mapping[str, Any], context: Optional[Mapping[str, Any]] = None) -> BaseModel:
    """Validate one step's answers.

    ``context`` carries answers from other steps so a flag answered earlier
    (e.g. building damage on step 4) governs this step's requirements (the
    number of photos on step 7). Raises ``ClaimValidationError`` listing every
    failing field of the step.
    """
    if step not in STEP_MODELS:
        raise ValueError(f"Unknown step: {step}")
    return _validate(STEP_MODELS[step], data, context or {}, steps={step})


def validate_submission(payload: Mapping[str, Any]) -> ClaimSubmission:
    """Authoritative check of a complete submission against every shape and rule."""
    return _validate(ClaimSubmission, payload, {}, steps=None)
