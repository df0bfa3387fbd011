from typing import Annotated

from fastapi import Request, Depends

from services.posts import PostService
from services.users import UserService


async def get_post_service(request: Request) -> PostService:
    """Get post service from app state"""
    return request.app.state.context.post_service


async def get_user_service(request: Request) -> UserService:
    """Get user service from app state"""
    return request.app.state.context.user_service


# Type annotations for dependency injection
Posts = Annotated[PostService, Depends(get_post_service)]
Users = Annotated[UserService, Depends(get_user_service)]
