from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

# 1. Input: Create / update post
class PostCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)
    tags: List[str] = []

class PostUpdate(BaseModel):
    content: Optional[str] = Field(None, min_length=1, max_length=2000)
    tags: Optional[List[str]] = None

# 2. Output: Post
class Engagement(BaseModel):
    likes: List[str] = []
    comments_count: int = 0

class AuthorSummary(BaseModel):
    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    profile: Optional[dict] = None

class PostResponse(BaseModel):
    id: str
    author_id: str
    author: Optional[AuthorSummary] = None
    content: str
    tags: List[str] = []
    engagement: Engagement
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

# 3. Input / Output: Comments
class CommentCreate(BaseModel):
    post_id: str = Field(..., alias="postId")
    content: str = Field(..., min_length=1, max_length=1000)
    parent_comment_id: Optional[str] = Field(None, alias="parentCommentId")

    class Config:
        populate_by_name = True

class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)

class CommentResponse(BaseModel):
    id: str
    post_id: str
    author_id: str
    author: Optional[AuthorSummary] = None
    content: str
    parent_comment_id: Optional[str] = None
    likes: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class PostDetailResponse(PostResponse):
    comments: List[CommentResponse] = []

class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_posts: int
    limit: int

class PostListResponse(BaseModel):
    message: str
    posts: List[PostResponse]
    pagination: Pagination
