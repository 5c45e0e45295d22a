from typing import List, Literal, Optional
from bson import ObjectId

ProjectStatus = Literal["draft", "pending", "active", "closed", "rejected"]
ProjectType = Literal["personal", "team", "open-source", "freelance"]
ProjectCategory = Literal["web", "mobile", "desktop", "ai", "game", "devops", "other"]
SlotStatus = Literal["open", "filled"]


def slot_status(slot: dict) -> str:
    """Slot status derived from its members; never stored independently of them."""
    return "filled" if len(slot.get("filled_by", [])) >= slot["quota"] else "open"


def has_capacity(slot: dict) -> bool:
    return len(slot.get("filled_by", [])) < slot["quota"]


def new_slot(role_name: str, required_skills: List[str], quota: int,
             optional_skills: Optional[List[str]] = None) -> dict:
    slot = {
        "id": str(ObjectId()),
        "role_name": role_name,
        "required_skills": list(required_skills),
        "optional_skills": list(optional_skills or []),
        "quota": quota,
        "filled_by": [],
    }
    slot["status"] = slot_status(slot)
    return slot


def find_slot(project: dict, slot_id: str) -> Optional[dict]:
    for slot in project.get("slots", []):
        if slot["id"] == slot_id:
            return slot
    return None


def with_member(slots: List[dict], slot_id: str, user_id: str) -> List[dict]:
    """Copy of `slots` with `user_id` admitted to `slot_id` and its status recomputed."""
    updated = []
    for slot in slots:
        if slot["id"] == slot_id:
            slot = {**slot, "filled_by": list(slot.get("filled_by", [])) + [user_id]}
            slot["status"] = slot_status(slot)
        updated.append(slot)
    return updated


def without_member(slots: List[dict], slot_id: str, user_id: str) -> List[dict]:
    updated = []
    for slot in slots:
        if slot["id"] == slot_id:
            slot = {**slot, "filled_by": [u for u in slot.get("filled_by", []) if u != user_id]}
            slot["status"] = slot_status(slot)
        updated.append(slot)
    return updated
