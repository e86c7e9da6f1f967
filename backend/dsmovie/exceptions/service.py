from typing import List, Optional

from dsmovie.domain.dto import FieldMessage


class ServiceException(Exception):
    """Base exception for service operation errors."""
    pass

class ResourceNotFoundException(ServiceException):
    """Raised when a requested resource is not found."""
    pass

class ReferentialIntegrityException(ServiceException):
    """Raised when a mutation is blocked by records that depend on the target."""
    pass

class ValidationException(ServiceException):
    """Raised when input data fails field validation, before anything is persisted."""

    def __init__(self, message: str, errors: Optional[List[FieldMessage]] = None):
        super().__init__(message)
        self.errors = errors or []
