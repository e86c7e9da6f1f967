from fastapi import APIRouter, Depends

from dsmovie.auth.dependencies import require_roles
from dsmovie.config import ROLE_ADMIN, ROLE_CLIENT
from dsmovie.domain.dto import MovieDTO, ScoreCreate
from dsmovie.domain.models import User
from dsmovie.service.dependencies import get_score_service
from dsmovie.service.score_service import ScoreService

router = APIRouter(
    prefix="/scores",
    tags=["Scores"],
    responses={404: {"description": "Not found"}}
)

@router.put("", response_model=MovieDTO)
def save_score(
    data: ScoreCreate,
    current_user: User = Depends(require_roles(ROLE_CLIENT, ROLE_ADMIN)),
    score_service: ScoreService = Depends(get_score_service)
):
    return score_service.save_score(current_user.username, data)
