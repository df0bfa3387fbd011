import logging
from typing import List, Optional

import bleach
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from exceptions import Conflict, NotFound, ValidationError
from models.post import Post
from services.firestore import FirestoreDB, POSTS, USERS, utc_now
from services.s3 import S3Service

logger = logging.getLogger(__name__)


def clean_text(value: Optional[str]) -> str:
    return bleach.clean(value or "", strip=True).strip()


def has_media(media: Optional[UploadFile]) -> bool:
    # browsers send an empty part when no file was chosen
    return media is not None and bool(media.filename)


class PostService:
    def __init__(self, db: FirestoreDB, storage: S3Service):
        self.db = db
        self.storage = storage

    def _require_post(self, post_id: str) -> dict:
        post = self.db.get(POSTS, post_id)
        if post is None:
            raise NotFound("Post not found.")
        return post

    def _with_author(self, post: dict) -> Post:
        author = self.db.get(USERS, post.get("author")) if post.get("author") else None
        return Post.from_document(post, author=author)

    def list_posts(self) -> List[Post]:
        """Get all posts, newest first, with their authors expanded"""
        posts = self.db.list_all(POSTS)
        authors = self.db.get_many(USERS, (post.get("author") for post in posts))
        return [Post.from_document(post, author=authors.get(post.get("author"))) for post in posts]

    def get_post(self, post_id: str) -> Post:
        return self._with_author(self._require_post(post_id))

    async def _discard_media(self, urls: List[str]):
        for url in urls:
            await run_in_threadpool(self.storage.delete_file, url)

    async def create_post(
            self,
            title: str,
            content: str,
            author: str,
            tags: Optional[List[str]] = None,
            media: Optional[UploadFile] = None,
    ) -> Post:
        """
        Create a new post, uploading its media first when a file is attached

        Nothing is persisted if the upload fails, and the uploaded object is
        removed again if the post cannot be saved.
        """
        title, content, author = clean_text(title), clean_text(content), (author or "").strip()
        if not title or not content or not author:
            raise ValidationError("Title, content and author are required.")
        if await run_in_threadpool(self.db.get, USERS, author) is None:
            raise ValidationError("Author does not exist.")

        media_urls = []
        if has_media(media):
            media_urls.append(await self.storage.upload_file(media))

        try:
            post = await run_in_threadpool(self.db.insert, POSTS, {
                "title": title,
                "content": content,
                "author": author,
                "tags": [clean_text(tag) for tag in tags or [] if clean_text(tag)],
                "media": media_urls,
                "likes": [],
                "comments": [],
            })
        except Exception:
            await self._discard_media(media_urls)
            raise

        logger.info("Created post %s by %s", post["id"], author)
        return Post.from_document(post)

    async def edit_post(
            self,
            post_id: str,
            title: Optional[str] = None,
            content: Optional[str] = None,
            author: Optional[str] = None,
            tags: Optional[List[str]] = None,
            media: Optional[UploadFile] = None,
    ) -> Post:
        """
        Update the supplied fields of a post

        A new media file replaces the old media; the replaced objects are
        deleted once the post is saved, and the new upload is deleted if it
        cannot be.
        """
        post = await run_in_threadpool(self._require_post, post_id)

        fields = {}
        for name, value in (("title", title), ("content", content)):
            if value is not None:
                cleaned = clean_text(value)
                if not cleaned:
                    raise ValidationError(f"{name.capitalize()} cannot be empty.")
                fields[name] = cleaned
        if author is not None:
            author = author.strip()
            if not author or await run_in_threadpool(self.db.get, USERS, author) is None:
                raise ValidationError("Author does not exist.")
            fields["author"] = author
        if tags is not None:
            fields["tags"] = [clean_text(tag) for tag in tags if clean_text(tag)]

        if not fields and not has_media(media):
            raise ValidationError("Nothing to update.")

        new_media = []
        if has_media(media):
            new_media.append(await self.storage.upload_file(media))
            fields["media"] = new_media

        try:
            updated = await run_in_threadpool(self.db.update, POSTS, post_id, fields)
        except Exception:
            await self._discard_media(new_media)
            raise
        if updated is None:
            await self._discard_media(new_media)
            raise NotFound("Post not found.")

        if new_media:
            await self._discard_media([url for url in post.get("media", []) if url not in new_media])
        return Post.from_document(updated)

    def like_post(self, post_id: str, user_id: str) -> Post:
        post = self._require_post(post_id)
        if self.db.get(USERS, user_id) is None:
            raise NotFound("User not found.")
        if user_id in post.get("likes", []):
            logger.warning("User %s already liked post %s", user_id, post_id)
            raise Conflict("Post already liked.")

        updated = self.db.add_to_array(POSTS, post_id, "likes", user_id)
        if updated is None:
            raise NotFound("Post not found.")
        return Post.from_document(updated)

    def dislike_post(self, post_id: str, user_id: str) -> Post:
        post = self._require_post(post_id)
        if user_id not in post.get("likes", []):
            raise Conflict("Post not liked yet.")

        updated = self.db.remove_from_array(POSTS, post_id, "likes", user_id)
        if updated is None:
            raise NotFound("Post not found.")
        return Post.from_document(updated)

    def add_comment(self, post_id: str, author: str, text: str) -> Post:
        """Append a comment to a post"""
        author, text = (author or "").strip(), clean_text(text)
        if not author or not text:
            raise ValidationError("Comment author and text are required.")
        self._require_post(post_id)
        if self.db.get(USERS, author) is None:
            raise NotFound("User not found.")

        comment = {"author": author, "text": text, "posted_at": utc_now()}
        updated = self.db.add_to_array(POSTS, post_id, "comments", comment)
        if updated is None:
            raise NotFound("Post not found.")
        return Post.from_document(updated)

    def delete_post(self, post_id: str):
        """Delete a post; bookmarks pointing at it are left in place"""
        if not self.db.delete(POSTS, post_id):
            raise NotFound("Post not found.")
        logger.info("Deleted post %s", post_id)
