"""Plant identification contracts: PlantReport + fallback."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Advisory only: the model is uncontrolled, so danger_level stays an open string.
DANGER_LEVELS = (
    "Safe",
    "Mildly Toxic",
    "Moderately Toxic",
    "Highly Toxic",
    "Deadly",
    "Unknown",
)

FALLBACK_SAFETY_TIP = "Unable to determine safety - consult a botanist if needed"

_TEXT_FIELDS = ("plant_name", "danger_level", "general_info", "habitat", "uses", "confidence")
_LIST_FIELDS = ("toxic_parts", "symptoms", "safety_tips")

# Used only when the model's object leaves a field out.
_MISSING_DEFAULTS = {
    "plant_name": "Unknown Plant",
    "danger_level": "Unknown",
    "general_info": "",
    "habitat": "Unknown",
    "uses": "Unknown",
    "confidence": "Low",
}


class PlantReport(BaseModel):
    """Structured plant safety report, serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        validate_by_name=True,
        populate_by_name=True,
        extra="ignore",
    )

    plant_name: str = _MISSING_DEFAULTS["plant_name"]
    is_dangerous: bool = False
    danger_level: str = _MISSING_DEFAULTS["danger_level"]
    toxic_parts: list[str] = Field(default_factory=list)
    symptoms: list[str] = Field(default_factory=list)
    safety_tips: list[str] = Field(default_factory=list)
    general_info: str = _MISSING_DEFAULTS["general_info"]
    habitat: str = _MISSING_DEFAULTS["habitat"]
    uses: str = _MISSING_DEFAULTS["uses"]
    confidence: str = _MISSING_DEFAULTS["confidence"]

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def _coerce_text(cls, v, info):
        if v is None:
            return _MISSING_DEFAULTS[info.field_name]
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator(*_LIST_FIELDS, mode="before")
    @classmethod
    def _coerce_list(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v] if v.strip() else []
        if isinstance(v, list):
            return [str(item) if isinstance(item, (int, float)) and not isinstance(item, bool) else item for item in v]
        return v

    @field_validator("is_dangerous", mode="before")
    @classmethod
    def _coerce_flag(cls, v):
        if v is None:
            return False
        return v


REPORT_KEYS = tuple(to_camel(name) for name in PlantReport.model_fields)


def fallback_report(raw_text: str) -> PlantReport:
    """Safe-default report used when the model reply cannot be parsed."""
    return PlantReport(
        plant_name="Unknown Plant",
        is_dangerous=False,
        danger_level="Unknown",
        toxic_parts=[],
        symptoms=[],
        safety_tips=[FALLBACK_SAFETY_TIP],
        general_info=raw_text,
        habitat="Unknown",
        uses="Unknown",
        confidence="Low",
    )
