import logging
from typing import Any, Mapping, Optional

from coursetrack.services.errors import Unauthorized

USER_ID_FIELD = "userId"
# axios manda el body de un DELETE como {"data": {...}}
NESTED_PAYLOAD_FIELD = "data"


def _clean_identity(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        # un surrogate suelto no se puede guardar ni consultar en Mongo
        value.encode("utf-8")
    except UnicodeEncodeError:
        return None
    return value.strip()


def resolve_user_id(query: Mapping[str, Any], body: Any = None) -> str:
    """Resuelve el userId del request. Gana la primera fuente que tenga valor:

    1. query param ``userId``
    2. campo ``userId`` del body
    3. campo ``data.userId`` del body (cualquier método)

    No es autenticación real: el cliente declara su propia identidad. Lo que
    sí se garantiza es que cada query al storage queda filtrada por este id.
    """
    user_id = _clean_identity(query.get(USER_ID_FIELD))

    if user_id is None and isinstance(body, dict):
        user_id = _clean_identity(body.get(USER_ID_FIELD))
        nested = body.get(NESTED_PAYLOAD_FIELD)
        if user_id is None and isinstance(nested, dict):
            user_id = _clean_identity(nested.get(USER_ID_FIELD))

    if user_id is None:
        logging.warning("Authentication failed: userId missing from request.")
        raise Unauthorized()
    return user_id
