"""
User API endpoints for the Polyglot server.

Listing, profile lookup and the single-field profile mutations. Missing users
surface as 404 through the ResourceNotFoundError handler.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..dependencies import get_user_service
from ..services.user_service import UserService
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

user_router = APIRouter(prefix="/api/users", tags=["users"])
profile_router = APIRouter(prefix="/users", tags=["users"])


class UpdateEmailRequest(BaseModel):
    newEmail: str = Field(..., min_length=3, max_length=320)


class UpdateNameRequest(BaseModel):
    newName: str = Field(..., min_length=1, max_length=255)


@user_router.get("")
async def get_all_users(user_service: UserService = Depends(get_user_service)) -> list[dict]:
    """Every user's public record."""
    users = await user_service.get_all_users()
    return [user.to_public_dict() for user in users]


@user_router.post("/{user_id}/email")
async def update_user_email(
    user_id: str,
    body: UpdateEmailRequest,
    user_service: UserService = Depends(get_user_service),
) -> dict:
    user = await user_service.update_user_email(user_id, body.newEmail)
    return user.to_public_dict()


@user_router.post("/{user_id}/userName")
async def update_user_name(
    user_id: str,
    body: UpdateNameRequest,
    user_service: UserService = Depends(get_user_service),
) -> dict:
    user = await user_service.update_user_name(user_id, body.newName)
    return user.to_public_dict()


@user_router.post("/{user_id}/friends")
async def add_friend(user_id: str, user_service: UserService = Depends(get_user_service)) -> dict:
    user = await user_service.add_friend(user_id)
    return user.to_public_dict()


@user_router.delete("/{user_id}/friends")
async def remove_friend(user_id: str, user_service: UserService = Depends(get_user_service)) -> dict:
    """Saturating decrement: the count never drops below zero."""
    user = await user_service.remove_friend(user_id)
    return user.to_public_dict()


@profile_router.get("/{user_id}")
async def get_user_profile(user_id: str, user_service: UserService = Depends(get_user_service)) -> dict:
    user = await user_service.get_user_profile(user_id)
    return user.to_public_dict()
