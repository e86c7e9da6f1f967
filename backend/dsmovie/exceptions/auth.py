class AuthException(Exception):
    """Base exception for authentication errors"""
    pass

class UnauthenticatedException(AuthException):
    """Raised when the caller's identity cannot be resolved to a user"""
    pass

class UsernameNotFoundException(UnauthenticatedException):
    """Raised when no login rows exist for a username"""
    pass

class InvalidCredentialsException(AuthException):
    """Raised when login credentials are invalid"""
    pass
