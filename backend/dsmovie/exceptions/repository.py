class RepositoryException(Exception):
    """Base exception for all repository-related errors."""
    pass

class IntegrityViolationException(RepositoryException):
    """Raised when a write is rejected because other rows still reference the entity."""
    pass

class InvalidEntityDataException(RepositoryException):
    """Raised when entity data is invalid or malformed."""
    pass

class RepositoryOperationException(RepositoryException):
    """Raised when a repository operation fails for any reason not covered by other exceptions."""
    pass
