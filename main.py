# main.py (raíz)
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.database import Database

from coursetrack.api.routes.tracked_course_routes import router as tracked_course_router
from coursetrack.config.database import create_mongo_client, get_mongo_db, probar_mongo
from coursetrack.config.settings import Settings, get_settings
from coursetrack.repositories.mongo_repository import TrackedCourseRepository


def create_app(db: Optional[Database] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Arma la app. Si no se pasa ``db`` se crea un MongoClient desde la config."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s [%(levelname)s] %(message)s")

    client = None
    if db is None:
        client = create_mongo_client(settings)
        db = get_mongo_db(client, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if client is not None:
            probar_mongo(db)
        TrackedCourseRepository(app.state.tracked_courses).ensure_indexes()
        yield
        if client is not None:
            client.close()

    app = FastAPI(title="Course Tracker API", version="1.0.0",
                  description="Seguimiento de cursos por usuario.", lifespan=lifespan)

    app.state.db = db
    app.state.tracked_courses = db[settings.mongo_collection]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", tags=["Health"])
    async def root():
        return {"message": "✅ Course Tracker API is up and running."}

    app.include_router(tracked_course_router, prefix=settings.api_prefix)
    return app


app = create_app()


if __name__ == "__main__":
    _settings = get_settings()
    uvicorn.run(app, host=_settings.host, port=_settings.port)
