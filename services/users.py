import logging
from typing import List

import bcrypt

from exceptions import NotFound, ValidationError
from models.post import Post
from models.user import User, UserCreate, UserUpdate
from services.firestore import FirestoreDB, POSTS, USERS

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: FirestoreDB, bcrypt_rounds: int = 12):
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    def hash_password(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.bcrypt_rounds)).decode("utf-8")

    def _require_user(self, user_id: str, message: str = "User not found.") -> dict:
        user = self.db.get(USERS, user_id)
        if user is None:
            raise NotFound(message)
        return user

    def create_user(self, user: UserCreate) -> User:
        data = user.model_dump(exclude_none=True)
        data["password"] = self.hash_password(user.password)
        data["bookmarks"] = []
        data["following"] = []

        created = self.db.insert(USERS, data)
        logger.info("Created user %s (%s)", created["id"], user.username)
        return User.from_document(created)

    def list_users(self) -> List[User]:
        return [User.from_document(user) for user in self.db.list_all(USERS)]

    def get_user(self, user_id: str) -> User:
        return User.from_document(self._require_user(user_id))

    def update_user(self, user_id: str, changes: UserUpdate) -> User:
        fields = changes.model_dump(exclude_unset=True, exclude_none=True)
        if "password" in fields:
            fields["password"] = self.hash_password(fields["password"])
        if not fields:
            return self.get_user(user_id)

        updated = self.db.update(USERS, user_id, fields)
        if updated is None:
            raise NotFound("User not found.")
        return User.from_document(updated)

    # --- bookmarks ---

    def add_bookmark(self, user_id: str, post_id: str) -> User:
        """Bookmark a post; bookmarking it again leaves the list unchanged"""
        self._require_user(user_id)
        updated = self.db.add_to_array(USERS, user_id, "bookmarks", post_id)
        if updated is None:
            raise NotFound("User not found.")
        return User.from_document(updated)

    def remove_bookmark(self, user_id: str, post_id: str) -> User:
        self._require_user(user_id)
        updated = self.db.remove_from_array(USERS, user_id, "bookmarks", post_id)
        if updated is None:
            raise NotFound("User not found.")
        return User.from_document(updated)

    def list_bookmarks(self, user_id: str) -> List[str]:
        """Raw bookmarked post IDs, including IDs of posts deleted since"""
        return self._require_user(user_id).get("bookmarks", [])

    def list_bookmarked_posts(self, user_id: str) -> List[Post]:
        """Bookmarked posts in bookmark order, skipping posts that no longer exist"""
        bookmarks = self.list_bookmarks(user_id)
        posts = self.db.get_many(POSTS, bookmarks)
        return [Post.from_document(posts[post_id]) for post_id in bookmarks if post_id in posts]

    # --- follows ---

    def follow_user(self, user_id: str, target_id: str) -> User:
        """
        Make `user_id` follow `target_id`. Following someone already followed is a no-op.
        """
        self._require_user(user_id)
        self._require_user(target_id, "Target user not found.")
        if user_id == target_id:
            raise ValidationError("Cannot follow yourself.")

        updated = self.db.add_to_array(USERS, user_id, "following", target_id)
        if updated is None:
            raise NotFound("User not found.")
        return User.from_document(updated)

    def unfollow_user(self, user_id: str, target_id: str) -> User:
        self._require_user(user_id)
        self._require_user(target_id, "Target user not found.")

        updated = self.db.remove_from_array(USERS, user_id, "following", target_id)
        if updated is None:
            raise NotFound("User not found.")
        return User.from_document(updated)

    def list_following(self, user_id: str) -> List[User]:
        """Users that `user_id` follows; accounts that no longer exist are skipped"""
        following = self._require_user(user_id).get("following", [])
        users = self.db.get_many(USERS, following)
        return [User.from_document(users[target]) for target in following if target in users]

    def list_followers(self, user_id: str) -> List[User]:
        self._require_user(user_id)
        return [User.from_document(user) for user in self.db.find_containing(USERS, "following", user_id)]
