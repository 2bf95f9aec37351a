# coursetrack/models/base.py
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_serializer


# Estructura base para entidades con timestamps de MongoDB
class MongoBaseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    createdAt: datetime
    updatedAt: datetime

    @field_serializer("createdAt", "updatedAt")
    def _iso_utc(self, dt: datetime) -> str:
        # Mongo devuelve datetimes naive en UTC
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
