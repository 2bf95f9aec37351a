# coursetrack/config/settings.py
import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel


class Settings(BaseModel):
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_database: str = "coursetrack"
    # Mongoose pluraliza el modelo TrackedCourse como "trackedcourses"
    mongo_collection: str = "trackedcourses"
    mongo_timeout_ms: int = 5000

    host: str = "0.0.0.0"
    port: int = 5000
    api_prefix: str = ""
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"


def _split_origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Lee variables de entorno (y .env si existe) una sola vez."""
    load_dotenv()
    return Settings(
        mongo_uri=os.getenv("MONGO_URI") or os.getenv("ATLAS_URI") or "mongodb://localhost:27017",
        mongo_database=os.getenv("MONGO_DATABASE", "coursetrack"),
        mongo_collection=os.getenv("MONGO_COLLECTION", "trackedcourses"),
        mongo_timeout_ms=int(os.getenv("MONGO_TIMEOUT_MS", "5000")),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
        api_prefix=os.getenv("API_PREFIX", ""),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
