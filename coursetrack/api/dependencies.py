import json
from typing import Any

from fastapi import Depends, HTTPException, Request

from coursetrack.repositories.mongo_repository import TrackedCourseRepository
from coursetrack.services.errors import Unauthorized
from coursetrack.services.tracked_course_service import TrackedCourseService
from coursetrack.utils.security import resolve_user_id


async def get_json_body(request: Request) -> Any:
    """Body JSON del request, o None si viene vacío o no es JSON válido."""
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


async def get_user_id(request: Request, body: Any = Depends(get_json_body)) -> str:
    try:
        return resolve_user_id(request.query_params, body)
    except Unauthorized as e:
        raise HTTPException(status_code=401, detail=e.message)


def get_tracked_course_service(request: Request) -> TrackedCourseService:
    # la colección la inyecta create_app (Mongo real o mongomock en tests)
    return TrackedCourseService(TrackedCourseRepository(request.app.state.tracked_courses))
