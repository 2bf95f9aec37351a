# coursetrack/services/tracked_course_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from coursetrack.models.tracked_course import merge_for_update, validate_course_fields
from coursetrack.repositories.mongo_repository import TrackedCourseRepository
from coursetrack.services.errors import NotFound


class TrackedCourseService:
    def __init__(self, repo: TrackedCourseRepository) -> None:
        self.repo = repo

    # -------------------- helpers internos --------------------
    def _clean(self, doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if not doc:
            return None
        d = dict(doc)
        if "_id" in d:
            d["id"] = str(d.pop("_id"))
        return d

    # -------------------- API --------------------
    def list_courses(self, user_id: str) -> List[Dict[str, Any]]:
        return [self._clean(d) for d in self.repo.list_by_owner(user_id)]

    def create_course(self, user_id: str, payload: Any) -> Dict[str, Any]:
        # 1) Validamos/normalizamos antes de tocar Mongo
        fields = validate_course_fields(payload)
        # 2) Persistimos
        created = self.repo.create(user_id, fields)
        logging.info(f"[tracked_courses.create] curso {created['_id']} creado para {user_id}")
        return self._clean(created)

    def get_course(self, user_id: str, course_id: str) -> Dict[str, Any]:
        doc = self.repo.read_one(user_id, course_id)
        if doc is None:
            raise NotFound()
        return self._clean(doc)

    def update_course(self, user_id: str, course_id: str, payload: Any) -> Dict[str, Any]:
        current = self.repo.read_one(user_id, course_id)
        if current is None:
            raise NotFound()

        fields = validate_course_fields(merge_for_update(current, payload))

        # el predicado vuelve a incluir userId; si lo borraron en el medio -> NotFound
        updated = self.repo.update(user_id, course_id, fields)
        if updated is None:
            raise NotFound()
        return self._clean(updated)

    def delete_course(self, user_id: str, course_id: str) -> None:
        if not self.repo.delete(user_id, course_id):
            raise NotFound()
        logging.info(f"[tracked_courses.delete] curso {course_id} borrado por {user_id}")
