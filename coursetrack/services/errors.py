# coursetrack/services/errors.py
from typing import Optional


class TrackedCourseError(Exception):
    """Base de los errores de dominio; las rutas los traducen a HTTP."""


class Unauthorized(TrackedCourseError):
    def __init__(self, message: str = "Unauthorized: User ID is required."):
        super().__init__(message)
        self.message = message


class InvalidField(TrackedCourseError):
    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        self.message = message or f"Invalid value for field '{field}'."
        super().__init__(f"{field}: {self.message}")


class NotFound(TrackedCourseError):
    # mismo mensaje si no existe o si es de otro usuario
    def __init__(self, message: str = "Course not found or not authorized."):
        super().__init__(message)
        self.message = message


class PersistenceError(TrackedCourseError):
    """El backend rechazó la escritura (error corregible por el cliente)."""


class UnexpectedStoreFailure(TrackedCourseError):
    """Cualquier otra falla del storage (conectividad, internos)."""
