# ========================================
# teamup/routes/application.py
# ========================================

from fastapi import APIRouter, Depends, HTTPException, Query
from bson import ObjectId
from typing import List, Optional

from teamup.database import get_db
from teamup.schemas.application import (
    ApplicationCreate,
    ApplicationEnvelope,
    MyApplicationResponse,
    ProjectApplicationResponse,
)
from teamup.services import application_workflow
from teamup.utils.auth import get_current_user

router = APIRouter(prefix="/applications", tags=["Applications"])


def _validate_id(value: str, label: str):
    if not ObjectId.is_valid(value):
        raise HTTPException(status_code=400, detail=f"Invalid {label} ID")


# ===========================
# APPLICANT ENDPOINTS
# ===========================

# ✅ 1. APPLY TO A PROJECT SLOT
@router.post("/apply", response_model=ApplicationEnvelope, status_code=201)
async def apply_to_slot(
    application: ApplicationCreate,
    current_user: dict = Depends(get_current_user)
):
    """Apply to one slot of a project. Creates a pending application."""

    _validate_id(application.project_id, "project")

    db = get_db()
    created = await application_workflow.submit_application(
        db,
        user_id=str(current_user["_id"]),
        project_id=application.project_id,
        slot_id=application.slot_id,
        message=application.message,
    )
    return {"message": "Your application has been submitted", "application": created}


# ✅ 2. GET MY APPLICATIONS
@router.get("/my-applications", response_model=List[MyApplicationResponse])
async def get_my_applications(current_user: dict = Depends(get_current_user)):
    """All applications submitted by the current user, newest first."""

    db = get_db()
    return await application_workflow.list_my_applications(db, str(current_user["_id"]))


# ✅ 3. CANCEL MY APPLICATION
@router.delete("/cancel/{application_id}", response_model=ApplicationEnvelope)
async def cancel_application(
    application_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Withdraw a pending application. Only the applicant can cancel it."""

    _validate_id(application_id, "application")

    db = get_db()
    cancelled = await application_workflow.cancel_application(
        db, application_id, str(current_user["_id"])
    )
    return {"message": "Your application has been cancelled", "application": cancelled}


# ===========================
# PROJECT OWNER ENDPOINTS
# ===========================

# ✅ 4. VIEW APPLICATIONS OF A PROJECT
@router.get("/{project_id}", response_model=List[ProjectApplicationResponse])
async def get_project_applications(
    project_id: str,
    status: Optional[str] = Query(None, description="Filter by status: pending, accepted, rejected, cancelled"),
    current_user: dict = Depends(get_current_user)
):
    """List applications to a project. Only the project owner can see them."""

    _validate_id(project_id, "project")

    db = get_db()
    return await application_workflow.list_project_applications(
        db, project_id, str(current_user["_id"]), status=status
    )


# ✅ 5. ACCEPT APPLICATION
@router.post("/accept/{application_id}", response_model=ApplicationEnvelope)
async def accept_application(
    application_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Accept an applicant into the slot. Fills the slot and closes it when the quota is reached."""

    _validate_id(application_id, "application")

    db = get_db()
    accepted = await application_workflow.accept_application(
        db, application_id, str(current_user["_id"])
    )
    return {"message": "Application accepted", "application": accepted}


# ✅ 6. REJECT APPLICATION
@router.post("/reject/{application_id}", response_model=ApplicationEnvelope)
async def reject_application(
    application_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Reject a pending application."""

    _validate_id(application_id, "application")

    db = get_db()
    rejected = await application_workflow.reject_application(
        db, application_id, str(current_user["_id"])
    )
    return {"message": "Application rejected", "application": rejected}
