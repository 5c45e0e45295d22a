# ========================================
# teamup/routes/user.py
# ========================================

from fastapi import APIRouter, Depends

from teamup.schemas.user import UserResponse, UserProfileUpdate
from teamup.database import get_db
from teamup.models.user import public_user
from teamup.utils.auth import get_current_user

router = APIRouter(prefix="/users", tags=["Users"])


# ✅ 1. GET MY PROFILE
@router.get("/profile", response_model=UserResponse)
async def get_profile(current_user: dict = Depends(get_current_user)):
    """Get the current user's profile."""

    return public_user(current_user)


# ✅ 2. UPDATE MY PROFILE
@router.put("/profile", response_model=UserResponse)
async def update_profile(
    profile_data: UserProfileUpdate,
    current_user: dict = Depends(get_current_user)
):
    """Update the current user's profile. Only the sent fields change."""

    db = get_db()

    update_data = {}
    if profile_data.profile:
        for key, value in profile_data.profile.dict(exclude_unset=True).items():
            update_data[f"profile.{key}"] = value
    if profile_data.social_links:
        for key, value in profile_data.social_links.dict(exclude_unset=True).items():
            update_data[f"social_links.{key}"] = value
    if profile_data.titles is not None:
        update_data["titles"] = profile_data.titles
    if profile_data.skills is not None:
        update_data["skills"] = profile_data.skills

    if update_data:
        await db.users.update_one(
            {"_id": current_user["_id"]},
            {"$set": update_data}
        )

    user = await db.users.find_one({"_id": current_user["_id"]})
    return public_user(user)
