import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from bson import ObjectId
from bson.errors import InvalidDocument, InvalidId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError, WriteError

from coursetrack.services.errors import PersistenceError, UnexpectedStoreFailure

OWNER_FIELD = "userId"
IMMUTABLE_FIELDS = ("_id", "id", OWNER_FIELD, "createdAt", "updatedAt")


@contextmanager
def _store_errors(op: str) -> Iterator[None]:
    """Mapea errores de pymongo a la taxonomía del dominio (sin reintentos)."""
    try:
        yield
    except (WriteError, InvalidDocument, UnicodeEncodeError) as e:
        # DuplicateKeyError es subclase de WriteError, DocumentTooLarge de InvalidDocument;
        # UnicodeEncodeError sale de bson con strings que no son UTF-8 válido
        logging.warning(f"[tracked_courses.{op}] escritura rechazada por Mongo: {e}")
        raise PersistenceError(str(e)) from e
    except PyMongoError as e:
        logging.error(f"[tracked_courses.{op}] error de Mongo: {e}")
        raise UnexpectedStoreFailure(str(e)) from e


class TrackedCourseRepository:
    """Acceso a la colección de cursos, siempre acotado al dueño.

    Toda lectura/escritura usa un predicado combinado ``{_id, userId}``: nunca
    se busca por id solo para chequear el dueño después. Un id inexistente, de
    otro usuario o mal formado da el mismo resultado (``None``/``False``).
    """

    def __init__(self, collection: Collection):
        self.col = collection

    @staticmethod
    def _now() -> datetime:
        # Mongo guarda milisegundos y devuelve datetimes naive en UTC
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        return now.replace(microsecond=now.microsecond // 1000 * 1000)

    @staticmethod
    def _stringify_id(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if not doc:
            return doc
        if "_id" in doc and isinstance(doc["_id"], ObjectId):
            doc["_id"] = str(doc["_id"])
        return doc

    @staticmethod
    def _owned(user_id: str, record_id: str) -> Optional[Dict[str, Any]]:
        try:
            oid = ObjectId(record_id)
        except (InvalidId, TypeError):
            return None
        return {"_id": oid, OWNER_FIELD: user_id}

    @staticmethod
    def _mutable(fields: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in fields.items() if k not in IMMUTABLE_FIELDS}

    def ensure_indexes(self) -> None:
        try:
            self.col.create_index([(OWNER_FIELD, ASCENDING), ("_id", ASCENDING)])
            self.col.create_index([(OWNER_FIELD, ASCENDING), ("createdAt", DESCENDING)])
        except PyMongoError as e:
            logging.warning(f"[tracked_courses.indexes] no se pudieron crear índices: {e}")

    # -------------------- CRUD --------------------
    def list_by_owner(self, user_id: str) -> List[Dict[str, Any]]:
        with _store_errors("list"):
            cursor = self.col.find({OWNER_FIELD: user_id}).sort(
                [("createdAt", DESCENDING), ("_id", DESCENDING)]
            )
            return [self._stringify_id(d) for d in cursor]

    def create(self, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        now = self._now()
        doc = self._mutable(fields)
        doc[OWNER_FIELD] = user_id
        doc["createdAt"] = now
        doc["updatedAt"] = now
        with _store_errors("create"):
            res = self.col.insert_one(doc)
        doc["_id"] = res.inserted_id
        return self._stringify_id(doc)

    def read_one(self, user_id: str, record_id: str) -> Optional[Dict[str, Any]]:
        query = self._owned(user_id, record_id)
        if query is None:
            return None
        with _store_errors("get"):
            doc = self.col.find_one(query)
        return self._stringify_id(doc)

    def update(self, user_id: str, record_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        query = self._owned(user_id, record_id)
        if query is None:
            return None
        updates = self._mutable(fields)
        updates["updatedAt"] = self._now()
        with _store_errors("update"):
            doc = self.col.find_one_and_update(
                query, {"$set": updates}, return_document=ReturnDocument.AFTER
            )
        return self._stringify_id(doc)

    def delete(self, user_id: str, record_id: str) -> bool:
        query = self._owned(user_id, record_id)
        if query is None:
            return False
        with _store_errors("delete"):
            res = self.col.delete_one(query)
        return res.deleted_count == 1
