# ========================================
# teamup/routes/post.py
# ========================================

from fastapi import APIRouter, Depends, HTTPException, Query
from bson import ObjectId
from datetime import datetime
from typing import Optional
import math

from teamup.database import get_db
from teamup.models.user import owner_summary
from teamup.routes.comment import comments_for_post
from teamup.schemas.post import (
    PostCreate,
    PostUpdate,
    PostResponse,
    PostDetailResponse,
    PostListResponse,
)
from teamup.utils.auth import get_current_user

router = APIRouter(prefix="/posts", tags=["Posts"])

SORTABLE_FIELDS = ["created_at", "updated_at", "author_id", "content"]


def serialize_post(post: dict, author: dict = None) -> dict:
    engagement = post.get("engagement", {})
    return {
        "id": str(post["_id"]),
        "author_id": post["author_id"],
        "author": owner_summary(author),
        "content": post["content"],
        "tags": post.get("tags", []),
        "engagement": {
            "likes": engagement.get("likes", []),
            "comments_count": engagement.get("comments_count", 0),
        },
        "created_at": post.get("created_at"),
        "updated_at": post.get("updated_at"),
    }


def parse_sort(sort_by: Optional[str]):
    """`field` or `field:asc|desc`; unknown fields fall back to newest first."""
    sort_field, sort_order = "created_at", -1
    if sort_by:
        field, _, order = sort_by.partition(":")
        if field in SORTABLE_FIELDS:
            sort_field = field
            sort_order = 1 if order.lower() == "asc" else -1
    return sort_field, sort_order


async def _get_own_post(db, post_id: str, current_user: dict) -> dict:
    if not ObjectId.is_valid(post_id):
        raise HTTPException(status_code=400, detail="Invalid post ID")

    post = await db.posts.find_one({"_id": ObjectId(post_id)})
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")

    if post["author_id"] != str(current_user["_id"]):
        raise HTTPException(status_code=403, detail="You can only modify your own posts")

    return post


# ✅ 1. LIST POSTS (paginated)
@router.get("", response_model=PostListResponse)
async def get_all_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    author: Optional[str] = Query(None, description="Filter by author id"),
    tag: Optional[str] = Query(None, description="Filter by tag"),
    sort_by: Optional[str] = Query(None, description="field or field:asc|desc"),
    current_user: dict = Depends(get_current_user)
):
    """Feed of posts with filters, sorting and pagination."""

    db = get_db()

    query = {}
    if author and ObjectId.is_valid(author):
        query["author_id"] = author
    if tag:
        query["tags"] = tag

    sort_field, sort_order = parse_sort(sort_by)
    skip = (page - 1) * limit

    posts = await db.posts.find(query).sort(sort_field, sort_order).skip(skip).limit(limit).to_list(limit)
    total = await db.posts.count_documents(query)

    result = []
    for post in posts:
        post_author = await db.users.find_one({"_id": ObjectId(post["author_id"])})
        result.append(serialize_post(post, post_author))

    return {
        "message": "Posts fetched successfully",
        "posts": result,
        "pagination": {
            "current_page": page,
            "total_pages": math.ceil(total / limit),
            "total_posts": total,
            "limit": limit
        }
    }


# ✅ 2. CREATE POST
@router.post("", response_model=PostResponse, status_code=201)
async def create_post(post: PostCreate, current_user: dict = Depends(get_current_user)):
    """Publish a new post."""

    if not post.content.strip():
        raise HTTPException(status_code=400, detail="Content is required")

    db = get_db()
    now = datetime.utcnow()

    post_data = {
        "author_id": str(current_user["_id"]),
        "content": post.content,
        "tags": post.tags,
        "engagement": {"likes": [], "comments_count": 0},
        "created_at": now,
        "updated_at": now
    }
    result = await db.posts.insert_one(post_data)
    post_data["_id"] = result.inserted_id

    return serialize_post(post_data, current_user)


# ✅ 3. GET POSTS OF A USER
@router.get("/user/{user_id}")
async def get_posts_by_user(user_id: str, current_user: dict = Depends(get_current_user)):
    """All posts of one user, newest first."""

    if not ObjectId.is_valid(user_id):
        raise HTTPException(status_code=400, detail="Invalid user ID")

    db = get_db()

    user = await db.users.find_one({"_id": ObjectId(user_id)})
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    posts = await db.posts.find({"author_id": user_id}).sort("created_at", -1).to_list(500)

    return {
        "count": len(posts),
        "message": "User posts fetched successfully",
        "posts": [serialize_post(p, user) for p in posts]
    }


# ✅ 4. GET POST WITH COMMENTS
@router.get("/{post_id}", response_model=PostDetailResponse)
async def get_post(post_id: str, current_user: dict = Depends(get_current_user)):
    """Get a post together with its comments."""

    if not ObjectId.is_valid(post_id):
        raise HTTPException(status_code=400, detail="Invalid post ID")

    db = get_db()
    post = await db.posts.find_one({"_id": ObjectId(post_id)})
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")

    author = await db.users.find_one({"_id": ObjectId(post["author_id"])})
    return {
        **serialize_post(post, author),
        "comments": await comments_for_post(db, post_id)
    }


# ✅ 5. UPDATE MY POST
@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    post_update: PostUpdate,
    current_user: dict = Depends(get_current_user)
):
    """Edit your own post."""

    db = get_db()
    post = await _get_own_post(db, post_id, current_user)

    update_data = post_update.dict(exclude_unset=True, exclude_none=True)
    if update_data:
        update_data["updated_at"] = datetime.utcnow()
        await db.posts.update_one({"_id": post["_id"]}, {"$set": update_data})

    updated = await db.posts.find_one({"_id": post["_id"]})
    return serialize_post(updated, current_user)


# ✅ 6. DELETE MY POST
@router.delete("/{post_id}")
async def delete_post(post_id: str, current_user: dict = Depends(get_current_user)):
    """Delete your own post and its comments."""

    db = get_db()
    post = await _get_own_post(db, post_id, current_user)

    await db.posts.delete_one({"_id": post["_id"]})
    await db.comments.delete_many({"post_id": post_id})

    return {"message": "Post deleted successfully"}


# ✅ 7. LIKE / UNLIKE POST
@router.post("/{post_id}/like")
async def like_post(post_id: str, current_user: dict = Depends(get_current_user)):
    """Toggle the current user's like on a post."""

    if not ObjectId.is_valid(post_id):
        raise HTTPException(status_code=400, detail="Invalid post ID")

    db = get_db()
    user_id = str(current_user["_id"])

    post = await db.posts.find_one({"_id": ObjectId(post_id)})
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")

    likes = post.get("engagement", {}).get("likes", [])
    if user_id in likes:
        await db.posts.update_one({"_id": post["_id"]}, {"$pull": {"engagement.likes": user_id}})
        return {"message": "Post unliked", "liked": False, "likes_count": len(likes) - 1}

    await db.posts.update_one({"_id": post["_id"]}, {"$addToSet": {"engagement.likes": user_id}})
    return {"message": "Post liked", "liked": True, "likes_count": len(likes) + 1}
