"""Current user endpoint."""

from fastapi import APIRouter, Depends

from api.deps import get_current_user
from api.schemas import UserResponse
from db.models import User

router = APIRouter(tags=["Users"])


@router.get(
    "/me",
    response_model=UserResponse | None,
    summary="Current user",
    description="Return the signed-in user, or null for anonymous requests.",
)
async def me(user: User | None = Depends(get_current_user)) -> UserResponse | None:
    if user is None:
        return None
    return UserResponse.model_validate(user)
