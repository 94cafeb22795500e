"""
Advisory request validation.

``AdvisoryRequest`` checks a raw request against the configured
``ValidationConfig`` enumerations before any resolution happens:

  - ``soil_type`` must be one of ``soil_types`` (case-insensitive); the
    configured spelling is kept, so ``"clay"`` becomes ``"Clay"``.
  - ``season`` must be one of ``seasons``, same normalization.
  - ``crop`` is optional; when given it is trimmed and at most
    ``max_crop_length`` characters. Any crop name is accepted.

The enumerations are passed through pydantic's validation context, so the
model itself stays configuration-free::

    request = validate_request(
        {"crop": "Rice", "soil_type": "clay", "season": "Kharif"},
        config.validation,
    )
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from agro_advisor.config import ValidationConfig

_DEFAULT_VALIDATION = ValidationConfig()


class InvalidAdvisoryRequest(ValueError):
    """Raised when an advisory request fails validation.

    Attributes:
        errors: One human-readable message per failed field.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("Invalid advisory request: " + "; ".join(errors))


class AdvisoryRequest(BaseModel):
    """A validated farmer request.

    Accepts both snake_case and camelCase keys (``soil_type`` / ``soilType``).
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    crop: Optional[str] = None
    soil_type: str
    season: str

    @field_validator("crop")
    @classmethod
    def validate_crop(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not v:
            return None
        limit = _validation_from(info).max_crop_length
        if len(v) > limit:
            raise ValueError(f"Crop name cannot exceed {limit} characters.")
        return v

    @field_validator("soil_type")
    @classmethod
    def validate_soil_type(cls, v: str, info: ValidationInfo) -> str:
        return _canonical(v, _validation_from(info).soil_types, "Soil type")

    @field_validator("season")
    @classmethod
    def validate_season(cls, v: str, info: ValidationInfo) -> str:
        return _canonical(v, _validation_from(info).seasons, "Season")


def validate_request(
    raw: dict[str, Any],
    validation: Optional[ValidationConfig] = None,
) -> AdvisoryRequest:
    """Validate a raw request dict.

    Args:
        raw: Request fields (snake_case or camelCase keys).
        validation: Accepted enumerations; defaults to ``ValidationConfig()``.

    Returns:
        Validated ``AdvisoryRequest``.

    Raises:
        InvalidAdvisoryRequest: With one message per failed field.
    """
    try:
        return AdvisoryRequest.model_validate(
            raw, context={"validation": validation or _DEFAULT_VALIDATION}
        )
    except ValidationError as exc:
        raise InvalidAdvisoryRequest(_messages(exc)) from exc


def _validation_from(info: ValidationInfo) -> ValidationConfig:
    context = info.context or {}
    return context.get("validation") or _DEFAULT_VALIDATION


def _canonical(value: str, allowed: list[str], label: str) -> str:
    cleaned = value.strip()
    for option in allowed:
        if option.lower() == cleaned.lower():
            return option
    raise ValueError(f"{label} must be one of: {', '.join(allowed)}")


def _messages(exc: ValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "request"
        msg = err["msg"]
        # pydantic prefixes custom errors with "Value error, "
        msg = msg.removeprefix("Value error, ")
        messages.append(f"{field}: {msg}")
    return messages
