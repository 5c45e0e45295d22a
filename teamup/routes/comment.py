# ========================================
# teamup/routes/comment.py
# ========================================

from fastapi import APIRouter, Depends, HTTPException
from bson import ObjectId
from datetime import datetime
from typing import List

from teamup.database import get_db
from teamup.models.user import owner_summary
from teamup.schemas.post import CommentCreate, CommentUpdate, CommentResponse
from teamup.utils.auth import get_current_user

router = APIRouter(prefix="/comments", tags=["Comments"])


def serialize_comment(comment: dict, author: dict = None) -> dict:
    return {
        "id": str(comment["_id"]),
        "post_id": comment["post_id"],
        "author_id": comment["author_id"],
        "author": owner_summary(author),
        "content": comment["content"],
        "parent_comment_id": comment.get("parent_comment_id"),
        "likes": comment.get("likes", []),
        "created_at": comment.get("created_at"),
        "updated_at": comment.get("updated_at"),
    }


async def comments_for_post(db, post_id: str) -> List[dict]:
    comments = await db.comments.find({"post_id": post_id}).sort("created_at", -1).to_list(1000)

    result = []
    for comment in comments:
        author = await db.users.find_one({"_id": ObjectId(comment["author_id"])})
        result.append(serialize_comment(comment, author))
    return result


# ✅ 1. CREATE COMMENT
@router.post("", response_model=CommentResponse, status_code=201)
async def create_comment(comment: CommentCreate, current_user: dict = Depends(get_current_user)):
    """Comment on a post, optionally as a reply to another comment."""

    if not ObjectId.is_valid(comment.post_id):
        raise HTTPException(status_code=400, detail="Invalid post ID")

    db = get_db()

    post = await db.posts.find_one({"_id": ObjectId(comment.post_id)})
    if not post:
        raise HTTPException(status_code=404, detail="Post to comment on was not found")

    if comment.parent_comment_id:
        if not ObjectId.is_valid(comment.parent_comment_id):
            raise HTTPException(status_code=400, detail="Invalid parent comment ID")
        parent = await db.comments.find_one({
            "_id": ObjectId(comment.parent_comment_id),
            "post_id": comment.post_id
        })
        if not parent:
            raise HTTPException(status_code=404, detail="Parent comment not found")

    now = datetime.utcnow()
    comment_data = {
        "post_id": comment.post_id,
        "author_id": str(current_user["_id"]),
        "content": comment.content,
        "parent_comment_id": comment.parent_comment_id,
        "likes": [],
        "created_at": now,
        "updated_at": now
    }
    result = await db.comments.insert_one(comment_data)
    comment_data["_id"] = result.inserted_id

    await db.posts.update_one(
        {"_id": post["_id"]},
        {"$inc": {"engagement.comments_count": 1}}
    )

    return serialize_comment(comment_data, current_user)


# ✅ 2. GET COMMENTS OF A POST
@router.get("/post/{post_id}", response_model=List[CommentResponse])
async def get_comments_by_post(post_id: str, current_user: dict = Depends(get_current_user)):
    """All comments of a post, newest first."""

    if not ObjectId.is_valid(post_id):
        raise HTTPException(status_code=400, detail="Invalid post ID")

    db = get_db()

    if not await db.posts.find_one({"_id": ObjectId(post_id)}, {"_id": 1}):
        raise HTTPException(status_code=404, detail="Post not found")

    return await comments_for_post(db, post_id)


# ✅ 3. UPDATE MY COMMENT
@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: str,
    comment_update: CommentUpdate,
    current_user: dict = Depends(get_current_user)
):
    """Edit one of your own comments."""

    if not ObjectId.is_valid(comment_id):
        raise HTTPException(status_code=400, detail="Invalid comment ID")

    db = get_db()

    comment = await db.comments.find_one({
        "_id": ObjectId(comment_id),
        "author_id": str(current_user["_id"])
    })
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found or not yours")

    await db.comments.update_one(
        {"_id": comment["_id"]},
        {"$set": {"content": comment_update.content, "updated_at": datetime.utcnow()}}
    )

    updated = await db.comments.find_one({"_id": comment["_id"]})
    return serialize_comment(updated, current_user)


# ✅ 4. DELETE MY COMMENT
@router.delete("/{comment_id}")
async def delete_comment(comment_id: str, current_user: dict = Depends(get_current_user)):
    """Delete one of your own comments and decrement the post's counter."""

    if not ObjectId.is_valid(comment_id):
        raise HTTPException(status_code=400, detail="Invalid comment ID")

    db = get_db()

    comment = await db.comments.find_one_and_delete({
        "_id": ObjectId(comment_id),
        "author_id": str(current_user["_id"])
    })
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found or not yours")

    # Never below zero
    await db.posts.update_one(
        {"_id": ObjectId(comment["post_id"]), "engagement.comments_count": {"$gt": 0}},
        {"$inc": {"engagement.comments_count": -1}}
    )

    return {"message": "Comment deleted successfully"}


# ✅ 5. LIKE / UNLIKE COMMENT
@router.post("/{comment_id}/like")
async def like_comment(comment_id: str, current_user: dict = Depends(get_current_user)):
    """Toggle the current user's like on a comment."""

    if not ObjectId.is_valid(comment_id):
        raise HTTPException(status_code=400, detail="Invalid comment ID")

    db = get_db()
    user_id = str(current_user["_id"])

    comment = await db.comments.find_one({"_id": ObjectId(comment_id)})
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")

    if user_id in comment.get("likes", []):
        await db.comments.update_one({"_id": comment["_id"]}, {"$pull": {"likes": user_id}})
        return {"message": "Comment unliked", "liked": False, "likes_count": len(comment["likes"]) - 1}

    await db.comments.update_one({"_id": comment["_id"]}, {"$addToSet": {"likes": user_id}})
    return {"message": "Comment liked", "liked": True, "likes_count": len(comment.get("likes", [])) + 1}
