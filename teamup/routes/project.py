# ========================================
# teamup/routes/project.py
# ========================================

from fastapi import APIRouter, Depends, HTTPException, Query
from bson import ObjectId
from datetime import datetime
from typing import Callable, List, Optional
import structlog

from teamup.config import ACCEPT_MAX_ATTEMPTS
from teamup.database import get_db
from teamup.models.project import find_slot, new_slot, slot_status
from teamup.models.user import owner_summary
from teamup.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectListResponse,
    ProjectEnvelope,
    SlotCreate,
    SlotUpdate,
)
from teamup.services.application_workflow import (
    cancel_pending_for_project,
    reject_pending_for_slot,
    swap_slots,
)
from teamup.utils.auth import get_current_user
from teamup.utils.errors import ConflictError

router = APIRouter(prefix="/projects", tags=["Projects"])

logger = structlog.get_logger()


# ===========================
# HELPERS
# ===========================

def serialize_project(project: dict, owner: dict = None) -> dict:
    return {
        "id": str(project["_id"]),
        "owner_id": project["owner_id"],
        "owner": owner_summary(owner),
        "title": project["title"],
        "description": project.get("description"),
        "category": project["category"],
        "status": project.get("status", "draft"),
        "project_type": project.get("project_type", "personal"),
        "slots": project.get("slots", []),
        "created_at": project.get("created_at"),
        "updated_at": project.get("updated_at"),
    }


async def _find_owner(db, project: dict):
    if not ObjectId.is_valid(project["owner_id"]):
        return None
    return await db.users.find_one({"_id": ObjectId(project["owner_id"])})


async def _get_owned_project(db, project_id: str, current_user: dict) -> dict:
    if not ObjectId.is_valid(project_id):
        raise HTTPException(status_code=400, detail="Invalid project ID")

    project = await db.projects.find_one({"_id": ObjectId(project_id)})
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")

    if project["owner_id"] != str(current_user["_id"]):
        raise HTTPException(status_code=403, detail="You are not allowed to perform this action")

    return project


async def _mutate_slots(db, project_id: str, current_user: dict,
                        mutate: Callable[[dict], List[dict]]) -> dict:
    """Apply `mutate` to the project's slots with a version compare-and-swap."""
    for attempt in range(1, ACCEPT_MAX_ATTEMPTS + 1):
        project = await _get_owned_project(db, project_id, current_user)
        slots = mutate(project)
        if await swap_slots(db, project, slots):
            return await db.projects.find_one({"_id": project["_id"]})
        logger.warning("slot_update_conflict", project_id=project_id, attempt=attempt)
    raise ConflictError("The project is being updated concurrently, please retry")


# ===========================
# PROJECT ENDPOINTS
# ===========================

# ✅ 1. CREATE PROJECT
@router.post("", response_model=ProjectEnvelope, status_code=201)
async def create_project(project: ProjectCreate, current_user: dict = Depends(get_current_user)):
    """Create a project owned by the current user, optionally with slots."""

    db = get_db()
    now = datetime.utcnow()

    project_data = {
        "owner_id": str(current_user["_id"]),
        "title": project.title,
        "description": project.description,
        "category": project.category,
        "project_type": project.project_type,
        "status": "draft",
        "slots": [
            new_slot(s.role_name, s.required_skills, s.quota, s.optional_skills)
            for s in project.slots
        ],
        "version": 0,
        "created_at": now,
        "updated_at": now
    }

    result = await db.projects.insert_one(project_data)
    project_data["_id"] = result.inserted_id

    logger.info("project_created", project_id=str(result.inserted_id), owner_id=project_data["owner_id"])
    return {
        "message": "Project created successfully",
        "project": serialize_project(project_data, current_user)
    }


# ✅ 2. GET MY PROJECTS
@router.get("/my-projects", response_model=ProjectListResponse)
async def get_my_projects(current_user: dict = Depends(get_current_user)):
    """Projects owned by the current user, newest first."""

    db = get_db()

    projects = await db.projects.find(
        {"owner_id": str(current_user["_id"])}
    ).sort("created_at", -1).to_list(500)

    return {
        "total": len(projects),
        "data": [serialize_project(p, current_user) for p in projects],
        "message": "You have no projects yet" if not projects else "Projects fetched successfully"
    }


# ✅ 3. LIST PROJECTS WITH FILTERS
@router.get("", response_model=ProjectListResponse)
async def get_all_projects(
    status: Optional[str] = Query(None, description="Filter by status: draft, pending, active, closed, rejected"),
    category: Optional[str] = Query(None, description="Filter by category"),
    project_type: Optional[str] = Query(None, description="Filter by project type"),
    limit: int = Query(100, le=500),
    current_user: dict = Depends(get_current_user)
):
    """List projects, newest first, with owner summaries."""

    db = get_db()

    query = {}
    if status:
        query["status"] = status
    if category:
        query["category"] = category
    if project_type:
        query["project_type"] = project_type

    projects = await db.projects.find(query).sort("created_at", -1).limit(limit).to_list(limit)

    result = []
    for project in projects:
        owner = await _find_owner(db, project)
        result.append(serialize_project(project, owner))

    return {"total": len(result), "data": result}


# ✅ 4. GET PROJECT (Public)
@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: str):
    """Get a single project with its slots."""

    if not ObjectId.is_valid(project_id):
        raise HTTPException(status_code=400, detail="Invalid project ID")

    db = get_db()
    project = await db.projects.find_one({"_id": ObjectId(project_id)})
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")

    owner = await _find_owner(db, project)
    return serialize_project(project, owner)


# ✅ 5. UPDATE PROJECT (Owner)
@router.put("/{project_id}", response_model=ProjectEnvelope)
async def update_project(
    project_id: str,
    project_update: ProjectUpdate,
    current_user: dict = Depends(get_current_user)
):
    """Update project details. Fields not sent are left unchanged."""

    db = get_db()
    project = await _get_owned_project(db, project_id, current_user)

    update_data = project_update.dict(exclude_unset=True, exclude_none=True)
    if update_data:
        update_data["updated_at"] = datetime.utcnow()
        await db.projects.update_one({"_id": project["_id"]}, {"$set": update_data})

    updated = await db.projects.find_one({"_id": project["_id"]})
    return {
        "message": "Project updated successfully",
        "project": serialize_project(updated, current_user)
    }


# ✅ 6. DELETE PROJECT (Owner)
@router.delete("/{project_id}")
async def delete_project(project_id: str, current_user: dict = Depends(get_current_user)):
    """Delete a project. Its pending applications are cancelled."""

    db = get_db()
    project = await _get_owned_project(db, project_id, current_user)

    await db.projects.delete_one({"_id": project["_id"]})
    closed = await cancel_pending_for_project(db, project_id)

    logger.info("project_deleted", project_id=project_id, closed_applications=closed)
    return {"message": "Project deleted successfully"}


# ===========================
# SLOT ENDPOINTS (Owner)
# ===========================

# ✅ 7. ADD SLOT
@router.post("/{project_id}/slots", response_model=ProjectEnvelope, status_code=201)
async def add_slot(
    project_id: str,
    slot: SlotCreate,
    current_user: dict = Depends(get_current_user)
):
    """Add a role slot to the project."""

    db = get_db()
    created = new_slot(slot.role_name, slot.required_skills, slot.quota, slot.optional_skills)

    project = await _mutate_slots(
        db, project_id, current_user,
        lambda p: p.get("slots", []) + [created]
    )

    logger.info("slot_added", project_id=project_id, slot_id=created["id"])
    return {"message": "Slot added successfully", "project": serialize_project(project, current_user)}


# ✅ 8. UPDATE SLOT
@router.put("/{project_id}/slots/{slot_id}", response_model=ProjectEnvelope)
async def update_slot(
    project_id: str,
    slot_id: str,
    slot_update: SlotUpdate,
    current_user: dict = Depends(get_current_user)
):
    """Update a slot. The quota cannot go below the number of accepted members."""

    db = get_db()
    changes = slot_update.dict(exclude_unset=True, exclude_none=True)
    previous = {}

    def apply_changes(project: dict) -> List[dict]:
        current = find_slot(project, slot_id)
        if not current:
            raise HTTPException(status_code=404, detail="Slot not found")
        previous["status"] = slot_status(current)

        updated = []
        for slot in project["slots"]:
            if slot["id"] == slot_id:
                slot = {**slot, **changes}
                if slot["quota"] < len(slot.get("filled_by", [])):
                    raise HTTPException(
                        status_code=400,
                        detail=f"Quota cannot be lower than the number of accepted members ({len(slot['filled_by'])})"
                    )
                slot["status"] = slot_status(slot)
            updated.append(slot)
        return updated

    project = await _mutate_slots(db, project_id, current_user, apply_changes)

    # Shrinking the quota down to the member count closes the slot
    if previous["status"] == "open" and slot_status(find_slot(project, slot_id)) == "filled":
        closed = await reject_pending_for_slot(db, project_id, slot_id)
        logger.info("slot_filled_by_quota_change", project_id=project_id, slot_id=slot_id, cascade_rejected=closed)

    return {"message": "Slot updated successfully", "project": serialize_project(project, current_user)}


# ✅ 9. DELETE SLOT
@router.delete("/{project_id}/slots/{slot_id}")
async def delete_slot(
    project_id: str,
    slot_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Remove a slot. Pending applications to it are cancelled."""

    db = get_db()

    def remove(project: dict) -> List[dict]:
        if not find_slot(project, slot_id):
            raise HTTPException(status_code=404, detail="Slot not found")
        return [s for s in project["slots"] if s["id"] != slot_id]

    await _mutate_slots(db, project_id, current_user, remove)
    closed = await cancel_pending_for_project(db, project_id, slot_id=slot_id)

    logger.info("slot_deleted", project_id=project_id, slot_id=slot_id, closed_applications=closed)
    return {"message": "Slot deleted successfully"}
