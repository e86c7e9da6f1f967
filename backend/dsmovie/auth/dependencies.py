from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from dsmovie.domain.models import User
from dsmovie.exceptions.auth import UnauthenticatedException
from dsmovie.service.auth_service import AuthService
from dsmovie.service.dependencies import get_auth_service, get_user_service
from dsmovie.service.user_service import UserService

# OAuth2 scheme for FastAPI
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")

def get_current_username(
    token: str = Depends(oauth2_scheme),
    auth_service: AuthService = Depends(get_auth_service)
) -> str:
    try:
        token_data = auth_service.decode_access_token(token)
    except UnauthenticatedException:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token_data.username

def get_current_user(
    username: str = Depends(get_current_username),
    user_service: UserService = Depends(get_user_service)
) -> User:
    # UnauthenticatedException is turned into a 401 by the app's exception handlers
    return user_service.authenticated(username)

def require_roles(*authorities: str):
    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if not any(current_user.has_role(authority) for authority in authorities):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        return current_user
    return dependency
