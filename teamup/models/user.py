from typing import Literal

UserRole = Literal["user", "admin"]


def public_user(user: dict) -> dict:
    """User document without secrets, with `id` as a string."""
    return {
        "id": str(user["_id"]),
        "username": user.get("username"),
        "email": user.get("email"),
        "role": user.get("role", "user"),
        "profile": user.get("profile", {}),
        "social_links": user.get("social_links", {}),
        "titles": user.get("titles", []),
        "skills": user.get("skills", []),
        "created_at": user.get("created_at"),
    }


def owner_summary(user: dict) -> dict:
    if not user:
        return None
    return {
        "id": str(user["_id"]),
        "username": user.get("username"),
        "email": user.get("email"),
        "profile": user.get("profile", {}),
    }
