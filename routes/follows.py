from typing import Dict, List

from fastapi import APIRouter

from dependencies import Users
from models.user import User, UserRef, UserResponse

router = APIRouter()


@router.post("/follow/{follow_user_id}")
def follow_user(follow_user_id: str, body: UserRef, users: Users) -> UserResponse:
    """
    Allows user 'userId' to follow 'follow_user_id'.
    Following a user twice keeps a single entry; following yourself is rejected.
    """
    user = users.follow_user(body.user_id, follow_user_id)
    return UserResponse(message=f"{body.user_id} now follows {follow_user_id}", user=user)


@router.post("/unfollow/{follow_user_id}")
def unfollow_user(follow_user_id: str, body: UserRef, users: Users) -> UserResponse:
    """
    Allows user 'userId' to unfollow 'follow_user_id'.
    Unfollowing a user that is not followed is a no-op.
    """
    user = users.unfollow_user(body.user_id, follow_user_id)
    return UserResponse(message=f"{body.user_id} unfollowed {follow_user_id}", user=user)


@router.get("/following/{user_id}")
def list_following(user_id: str, users: Users) -> Dict[str, List[User]]:
    """
    Returns the users that 'user_id' is following.
    """
    return {"following": users.list_following(user_id)}


@router.get("/followers/{user_id}")
def list_followers(user_id: str, users: Users) -> Dict[str, List[User]]:
    """
    Returns the users who follow 'user_id'.
    """
    return {"followers": users.list_followers(user_id)}
