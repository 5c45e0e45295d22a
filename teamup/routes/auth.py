# ========================================
# teamup/routes/auth.py
# ========================================

from fastapi import APIRouter, HTTPException
from bson import ObjectId
from datetime import datetime
import structlog

from teamup.schemas.user import UserCreate, UserLogin, RefreshRequest, AuthResponse, TokenResponse
from teamup.database import get_db
from teamup.models.user import public_user
from teamup.utils.security import get_password_hash, verify_password, password_needs_rehash
from teamup.utils.auth import issue_tokens, decode_refresh_token

router = APIRouter(prefix="/auth", tags=["Auth"])

logger = structlog.get_logger()


# ✅ 1. REGISTER
@router.post("/register", response_model=AuthResponse, status_code=201)
async def register_user(user: UserCreate):
    """Register a new user and return a token pair."""
    db = get_db()

    # Username and email must both be free
    existing_user = await db.users.find_one({"$or": [{"username": user.username}, {"email": user.email}]})
    if existing_user:
        raise HTTPException(status_code=409, detail="Username or email already registered")

    user_dict = {
        "username": user.username,
        "email": user.email,
        "password": get_password_hash(user.password),
        "role": "user",
        "profile": {
            "name": user.name,
            "surname": user.surname,
            "bio": "",
            "avatar_url": "",
            "location": ""
        },
        "social_links": {"github": "", "linkedin": "", "portfolio": ""},
        "titles": [],
        "skills": [],
        "is_active": True,
        "created_at": datetime.utcnow()
    }

    result = await db.users.insert_one(user_dict)
    user_dict["_id"] = result.inserted_id

    tokens = await issue_tokens(db, user_dict)
    logger.info("user_registered", user_id=str(result.inserted_id))

    return {"message": "Registration successful", "user": public_user(user_dict), **tokens}


# ✅ 2. LOGIN
@router.post("/login", response_model=AuthResponse)
async def login(user_credentials: UserLogin):
    """Login and get an access/refresh token pair."""

    db = get_db()

    user = await db.users.find_one({"email": user_credentials.email})
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not verify_password(user_credentials.password, user["password"]):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not user.get("is_active", True):
        raise HTTPException(status_code=403, detail="Account is disabled")

    if password_needs_rehash(user["password"]):
        await db.users.update_one(
            {"_id": user["_id"]},
            {"$set": {"password": get_password_hash(user_credentials.password)}}
        )

    tokens = await issue_tokens(db, user)
    logger.info("user_logged_in", user_id=str(user["_id"]))

    return {"message": "Login successful", "user": public_user(user), **tokens}


# ✅ 3. REFRESH TOKENS
@router.post("/token-refresh", response_model=TokenResponse)
async def token_refresh(request: RefreshRequest):
    """Exchange a stored refresh token for a new token pair."""

    db = get_db()

    stored = await db.tokens.find_one({"refresh_token": request.refresh_token})
    user_id = decode_refresh_token(request.refresh_token)
    if not stored or not user_id or stored["user_id"] != user_id:
        raise HTTPException(status_code=403, detail="Invalid refresh token, please log in again")

    user = await db.users.find_one({"_id": ObjectId(user_id)})
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return await issue_tokens(db, user)


# ✅ 4. LOGOUT
@router.post("/logout")
async def logout(request: RefreshRequest):
    """Revoke a refresh token."""

    db = get_db()

    result = await db.tokens.delete_one({"refresh_token": request.refresh_token})
    if result.deleted_count == 0:
        raise HTTPException(status_code=403, detail="Invalid refresh token")

    return {"message": "Logged out successfully"}
