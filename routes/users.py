from typing import List

from fastapi import APIRouter

from dependencies import Users
from exceptions import NotFound
from models.user import User, UserCreate, UserUpdate, UserResponse

router = APIRouter()


@router.post("/user", status_code=201)
def create_user(user: UserCreate, users: Users) -> UserResponse:
    """Create a new user account"""
    return UserResponse(message="User saved successfully.", user=users.create_user(user))


@router.get("/user")
def list_users(users: Users) -> List[User]:
    """List all users; passwords are never included"""
    result = users.list_users()
    if not result:
        raise NotFound("Failed to find users.")
    return result


@router.get("/user/{user_id}")
def get_user(user_id: str, users: Users) -> User:
    return users.get_user(user_id)


@router.post("/user/update/{user_id}")
def update_user(user_id: str, changes: UserUpdate, users: Users) -> User:
    return users.update_user(user_id, changes)
