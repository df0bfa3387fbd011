from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from models.user import User


class Comment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    author: str
    text: str
    posted_at: str = Field(..., alias="postedAt")


class Post(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    content: str
    author: Union[User, str]
    tags: List[str] = []
    media: List[str] = []
    likes: List[str] = []
    comments: List[Comment] = []
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    @classmethod
    def from_document(cls, data: dict, author: Optional[dict] = None) -> "Post":
        """
        Build a post from a stored document

        Args:
            data: the stored post, including its id
            author: the referenced user document; when given, replaces the author id
        """
        post = dict(data)
        if author is not None:
            post["author"] = User.from_document(author)
        return cls.model_validate(post)


class CommentRequest(BaseModel):
    author: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)


class PostCreated(BaseModel):
    message: str
    post: Post


class PostUpdate(BaseModel):
    """Editable post fields; anything else in the body is ignored"""
    title: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    tags: Optional[List[str]] = None
