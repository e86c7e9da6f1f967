from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from dsmovie.auth.dependencies import get_current_user
from dsmovie.domain.dto import Token, UserProfile
from dsmovie.domain.models import User
from dsmovie.service.dependencies import get_auth_service
from dsmovie.service.auth_service import AuthService
from dsmovie.exceptions.auth import InvalidCredentialsException

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={404: {"description": "Not found"}}
)

@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    auth_service: AuthService = Depends(get_auth_service)
):
    try:
        _, access_token = auth_service.authenticate_user(form_data.username, form_data.password)
        return Token(access_token=access_token, token_type="bearer")
    except InvalidCredentialsException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"}
        )

@router.get("/me", response_model=UserProfile)
def read_user_me(current_user: User = Depends(get_current_user)):
    return UserProfile(
        id=current_user.id,
        name=current_user.name,
        username=current_user.username,
        authorities=current_user.authorities
    )
