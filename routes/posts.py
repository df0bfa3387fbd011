from typing import List, Optional, Dict

from fastapi import APIRouter, File, Form, Request, UploadFile
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile as StarletteUploadFile

from dependencies import Posts
from exceptions import ValidationError
from models.post import Post, PostCreated, PostUpdate, CommentRequest
from models.user import UserRef

router = APIRouter()


@router.get("/post")
def get_posts(posts: Posts) -> List[Post]:
    """Get all posts with their authors"""
    return posts.list_posts()


@router.post("/user/post", status_code=201)
async def create_post(
        posts: Posts,
        title: str = Form(""),
        content: str = Form(""),
        author: str = Form(""),
        tags: List[str] = Form([]),
        media: Optional[UploadFile] = File(None),
) -> PostCreated:
    """Create a new post, optionally with a media file"""
    post = await posts.create_post(title, content, author, tags=tags, media=media)
    return PostCreated(message="Post created successfully", post=post)


@router.get("/post/{post_id}")
def get_post(post_id: str, posts: Posts) -> Post:
    return posts.get_post(post_id)


def read_changes(data) -> PostUpdate:
    try:
        return PostUpdate.model_validate(data)
    except PydanticValidationError:
        raise ValidationError("Post fields must be text and tags a list of text.")


@router.post("/posts/edit/{post_id}")
async def edit_post(post_id: str, request: Request, posts: Posts) -> Post:
    """
    Edit a post from a JSON body, or from form fields with an optional media
    file. Only the supplied fields change; a new media file replaces the
    post's media.
    """
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise ValidationError("Request body is not valid JSON.")
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object.")
        return await posts.edit_post(post_id, **read_changes(body).model_dump())

    async with request.form() as form:
        media = form.get("media")
        changes = read_changes({
            "title": form.get("title"),
            "content": form.get("content"),
            "author": form.get("author"),
            "tags": form.getlist("tags") or None,
        })
        return await posts.edit_post(
            post_id,
            **changes.model_dump(),
            media=media if isinstance(media, StarletteUploadFile) else None,
        )


@router.post("/posts/like/{post_id}")
def like_post(post_id: str, body: UserRef, posts: Posts) -> Post:
    return posts.like_post(post_id, body.user_id)


@router.post("/posts/dislike/{post_id}")
def dislike_post(post_id: str, body: UserRef, posts: Posts) -> Post:
    return posts.dislike_post(post_id, body.user_id)


@router.post("/posts/comment/{post_id}")
def add_comment(post_id: str, comment: CommentRequest, posts: Posts) -> Post:
    """Add a comment to a post"""
    return posts.add_comment(post_id, comment.author, comment.text)


@router.delete("/user/posts/{post_id}")
def delete_post(post_id: str, posts: Posts) -> Dict[str, str]:
    posts.delete_post(post_id)
    return {"message": "Post deleted successfully."}
