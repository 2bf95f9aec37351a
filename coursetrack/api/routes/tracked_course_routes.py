# tracked_course_routes.py
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from coursetrack.api.dependencies import get_json_body, get_tracked_course_service, get_user_id
from coursetrack.models.tracked_course import TrackedCourseOut
from coursetrack.services.errors import (
    InvalidField,
    NotFound,
    PersistenceError,
    TrackedCourseError,
)
from coursetrack.services.tracked_course_service import TrackedCourseService

router = APIRouter(prefix="/tracked-courses", tags=["tracked-courses"])


def _to_http(e: TrackedCourseError, action: str) -> HTTPException:
    if isinstance(e, InvalidField):
        return HTTPException(status_code=400, detail={"field": e.field, "message": e.message})
    if isinstance(e, NotFound):
        return HTTPException(status_code=404, detail=e.message)
    if isinstance(e, PersistenceError):
        # la validación debería haberlo atajado: es un error del input, no del server
        return HTTPException(status_code=400, detail=f"Error {action} course: {e}")
    return HTTPException(status_code=500, detail=f"Error {action} course: {e}")


# ===============================================================
# 📋 GET
# ===============================================================
@router.get("", response_model=List[TrackedCourseOut])
def list_tracked_courses(
    user_id: str = Depends(get_user_id),
    svc: TrackedCourseService = Depends(get_tracked_course_service),
):
    try:
        return svc.list_courses(user_id)
    except TrackedCourseError as e:
        raise _to_http(e, "fetching")


@router.get("/{course_id}", response_model=TrackedCourseOut)
def get_tracked_course(
    course_id: str,
    user_id: str = Depends(get_user_id),
    svc: TrackedCourseService = Depends(get_tracked_course_service),
):
    try:
        return svc.get_course(user_id, course_id)
    except TrackedCourseError as e:
        raise _to_http(e, "fetching")


# ===============================================================
# ✏️ ALTA / MODIFICACIÓN
# ===============================================================
@router.post("/add", status_code=status.HTTP_201_CREATED)
def add_tracked_course(
    user_id: str = Depends(get_user_id),
    body: Any = Depends(get_json_body),
    svc: TrackedCourseService = Depends(get_tracked_course_service),
) -> Dict[str, str]:
    try:
        created = svc.create_course(user_id, body)
    except TrackedCourseError as e:
        raise _to_http(e, "adding")
    return {"message": "Course added successfully!", "id": created["id"]}


@router.post("/update/{course_id}")
def update_tracked_course(
    course_id: str,
    user_id: str = Depends(get_user_id),
    body: Any = Depends(get_json_body),
    svc: TrackedCourseService = Depends(get_tracked_course_service),
) -> Dict[str, str]:
    try:
        svc.update_course(user_id, course_id, body)
    except TrackedCourseError as e:
        raise _to_http(e, "updating")
    return {"message": "Course updated successfully!"}


# ===============================================================
# 🗑️ BAJA
# ===============================================================
@router.delete("/{course_id}")
def delete_tracked_course(
    course_id: str,
    user_id: str = Depends(get_user_id),
    svc: TrackedCourseService = Depends(get_tracked_course_service),
) -> Dict[str, str]:
    try:
        svc.delete_course(user_id, course_id)
    except TrackedCourseError as e:
        raise _to_http(e, "deleting")
    return {"message": "Course deleted successfully."}
