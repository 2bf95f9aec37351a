# coursetrack/models/tracked_course.py
import math
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from coursetrack.models.base import MongoBaseModel
from coursetrack.services.errors import InvalidField

MIN_COURSE_NAME_LENGTH = 3

# Campos que el usuario puede modificar (nunca _id, userId ni createdAt)
MUTABLE_FIELDS = (
    "courseName",
    "status",
    "progress",
    "instructor",
    "certificateLink",
    "notes",
    "completionDate",
)


class CourseStatus(str, Enum):
    ONGOING = "Ongoing"
    COMPLETED = "Completed"
    PLANNED = "Planned"


def _utf8_or_error(value: str, field: str) -> str:
    # JSON admite surrogates sueltos ("\ud800") que BSON no puede codificar
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValueError(f"{field} must be valid UTF-8 text") from None
    return value


def _to_utc_date(value: datetime) -> date:
    # con offset se pasa a UTC antes de quedarse con la fecha (igual que new Date())
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


def _parse_date(value: Any) -> Any:
    if isinstance(value, datetime):
        return _to_utc_date(value)
    if not isinstance(value, str):
        return value
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        # "2024-05-01T00:00:00.000Z" (lo que manda un new Date() del front)
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError("completionDate must be a valid ISO date") from None
    return _to_utc_date(parsed)


# Payload de creación/actualización.
# El orden de los campos es el orden de validación: el primer error gana.
class TrackedCourseIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    courseName: StrictStr
    status: CourseStatus
    progress: Union[StrictInt, StrictFloat]
    instructor: Optional[StrictStr] = None
    certificateLink: Optional[StrictStr] = None
    notes: Optional[StrictStr] = None
    completionDate: Optional[date] = None

    @field_validator("courseName")
    @classmethod
    def validate_course_name(cls, v: str) -> str:
        cleaned = _utf8_or_error(v, "courseName").strip()
        if len(cleaned) < MIN_COURSE_NAME_LENGTH:
            raise ValueError(f"courseName must be at least {MIN_COURSE_NAME_LENGTH} characters long")
        return cleaned

    @field_validator("progress")
    @classmethod
    def validate_progress(cls, v: Union[int, float]) -> Union[int, float]:
        if not math.isfinite(v) or v < 0 or v > 100:
            raise ValueError("Progress must be a number between 0 and 100.")
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return v

    @field_validator("instructor", "certificateLink", "notes")
    @classmethod
    def blank_to_none(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        if v is None:
            return None
        cleaned = _utf8_or_error(v, info.field_name).strip()
        return cleaned or None

    @field_validator("completionDate", mode="before")
    @classmethod
    def validate_completion_date(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return _parse_date(v)

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump()
        doc["status"] = self.status.value
        # BSON no tiene tipo date: se guarda como datetime a medianoche (UTC)
        if self.completionDate is not None:
            d = self.completionDate
            doc["completionDate"] = datetime(d.year, d.month, d.day)
        return doc


def validate_course_fields(raw: Any) -> Dict[str, Any]:
    """Valida y normaliza un payload crudo; devuelve el documento listo para Mongo.

    Traduce el primer error de pydantic a ``InvalidField(<campo>)``.
    """
    if not isinstance(raw, dict):
        raise InvalidField("body", "Request body must be a JSON object.")
    try:
        course = TrackedCourseIn.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        loc = first.get("loc") or ("body",)
        raise InvalidField(str(loc[0]), first.get("msg"))
    return course.to_document()


def merge_for_update(existing: Dict[str, Any], raw: Any) -> Dict[str, Any]:
    """Copia los campos mutables del registro y los pisa con lo que vino en el request."""
    if not isinstance(raw, dict):
        raise InvalidField("body", "Request body must be a JSON object.")
    merged = {k: existing.get(k) for k in MUTABLE_FIELDS}
    merged.update({k: v for k, v in raw.items() if k in MUTABLE_FIELDS})
    return merged


# Respuesta al cliente (incluye id y timestamps)
class TrackedCourseOut(MongoBaseModel):
    userId: str
    courseName: str
    status: CourseStatus
    progress: Union[int, float]
    instructor: Optional[str] = None
    certificateLink: Optional[str] = None
    notes: Optional[str] = None
    completionDate: Optional[date] = None

    @field_validator("completionDate", mode="before")
    @classmethod
    def _from_bson(cls, v: Any) -> Any:
        return v.date() if isinstance(v, datetime) else v
