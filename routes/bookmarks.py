from typing import List

from fastapi import APIRouter

from dependencies import Users
from models.post import Post
from models.user import UserRef, UserResponse

router = APIRouter()


@router.post("/bookmark/{post_id}")
def add_bookmark(post_id: str, body: UserRef, users: Users) -> UserResponse:
    """Bookmark a post for a user; bookmarking twice keeps a single entry"""
    user = users.add_bookmark(body.user_id, post_id)
    return UserResponse(message="Post bookmarked.", user=user)


@router.post("/remove-bookmark/{post_id}")
def remove_bookmark(post_id: str, body: UserRef, users: Users) -> UserResponse:
    user = users.remove_bookmark(body.user_id, post_id)
    return UserResponse(message="Bookmark removed.", user=user)


@router.get("/bookmark/{user_id}")
def list_bookmarks(user_id: str, users: Users) -> List[str]:
    """Bookmarked post IDs, as stored"""
    return users.list_bookmarks(user_id)


@router.get("/bookmark/{user_id}/posts")
def list_bookmarked_posts(user_id: str, users: Users) -> List[Post]:
    """Bookmarked posts that still exist"""
    return users.list_bookmarked_posts(user_id)
