# ========================================
# teamup/services/application_workflow.py - SLOT APPLICATION LIFECYCLE
# ========================================
"""
Lifecycle of an application to a project slot.

    pending -> accepted | rejected | cancelled     (all three are terminal)

Slots live inside their project document, so every slot mutation is a
compare-and-swap on the project's `version` field: the new `slots` array is
written only if nobody else wrote the project since it was read. A losing
writer re-reads the project and re-validates, so the first committed accept
wins the last unit of a quota.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

import structlog
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from teamup.config import ACCEPT_MAX_ATTEMPTS
from teamup.models.application import (
    PENDING,
    ACCEPTED,
    REJECTED,
    CANCELLED,
    LIVE_STATUSES,
    CANCEL_DENIALS,
    ACCEPT_DENIALS,
    REJECT_DENIALS,
)
from teamup.models.project import (
    find_slot,
    has_capacity,
    slot_status,
    with_member,
    without_member,
)
from teamup.utils.errors import (
    ConflictError,
    DuplicateApplicationError,
    ForbiddenError,
    InternalError,
    InvalidTransitionError,
    NotFoundError,
    QuotaExceededError,
)

logger = structlog.get_logger()


# ===========================
# HELPERS
# ===========================

def serialize_application(doc: dict) -> dict:
    return {
        "id": str(doc["_id"]),
        "project_id": doc["project_id"],
        "slot_id": doc["slot_id"],
        "user_id": doc["user_id"],
        "role_name": doc["role_name"],
        "message": doc.get("message"),
        "status": doc["status"],
        "applied_at": doc["applied_at"],
        "responded_at": doc.get("responded_at"),
    }


@asynccontextmanager
async def persistence_guard(operation: str, **context):
    """Turn driver failures into an opaque InternalError."""
    try:
        yield
    except DuplicateKeyError:
        raise
    except PyMongoError as e:
        logger.error("persistence_failure", operation=operation, error=str(e), **context)
        raise InternalError("An unexpected error occurred, please try again later")


async def _get_application(db, application_id: str) -> dict:
    application = None
    if ObjectId.is_valid(application_id):
        application = await db.applications.find_one({"_id": ObjectId(application_id)})
    if not application:
        raise NotFoundError("Application not found")
    return application


async def _get_project(db, project_id: str) -> dict:
    project = None
    if ObjectId.is_valid(project_id):
        project = await db.projects.find_one({"_id": ObjectId(project_id)})
    if not project:
        raise NotFoundError("Project not found")
    return project


def _ensure_owner(project: dict, actor_id: str):
    if project["owner_id"] != actor_id:
        raise ForbiddenError("You are not allowed to perform this action")


def version_filter(project: dict) -> dict:
    if "version" in project:
        return {"_id": project["_id"], "version": project["version"]}
    return {"_id": project["_id"], "version": {"$exists": False}}


async def swap_slots(db, project: dict, slots: List[dict]) -> bool:
    """Write `slots` only if the project is unchanged since it was read."""
    result = await db.projects.update_one(
        version_filter(project),
        {
            "$set": {"slots": slots, "updated_at": datetime.utcnow()},
            "$inc": {"version": 1},
        },
    )
    return result.matched_count == 1


async def _release_member(db, project_id: str, slot_id: str, user_id: str):
    """Undo a slot admission whose application could not be claimed."""
    for _ in range(ACCEPT_MAX_ATTEMPTS):
        project = await db.projects.find_one({"_id": ObjectId(project_id)})
        if not project or not find_slot(project, slot_id):
            return
        slots = without_member(project["slots"], slot_id, user_id)
        if await swap_slots(db, project, slots):
            return
    logger.error(
        "slot_release_failed",
        project_id=project_id,
        slot_id=slot_id,
        user_id=user_id,
    )
    raise InternalError("An unexpected error occurred, please try again later")


# ===========================
# APPLICANT OPERATIONS
# ===========================

async def submit_application(db, user_id: str, project_id: str, slot_id: str,
                             message: Optional[str] = None) -> dict:
    """Create a pending application for one slot of a project."""

    user = await db.users.find_one({"_id": ObjectId(user_id)})
    if not user:
        raise NotFoundError("User not found")

    project = await _get_project(db, project_id)

    slot = find_slot(project, slot_id)
    if not slot:
        raise NotFoundError("Slot not found")

    if not has_capacity(slot):
        raise QuotaExceededError("The quota for this slot is full, applications are closed")

    existing = await db.applications.find_one({
        "project_id": project_id,
        "slot_id": slot_id,
        "user_id": user_id,
        "status": {"$in": list(LIVE_STATUSES)}
    })
    if existing:
        raise DuplicateApplicationError("You have already applied to this slot")

    application_data = {
        "project_id": project_id,
        "slot_id": slot_id,
        "user_id": user_id,
        "role_name": slot["role_name"],
        "message": message,
        "status": PENDING,
        "applied_at": datetime.utcnow(),
        "responded_at": None
    }

    try:
        async with persistence_guard("submit_application", project_id=project_id):
            result = await db.applications.insert_one(application_data)
    except DuplicateKeyError:
        raise DuplicateApplicationError("You have already applied to this slot")

    application_data["_id"] = result.inserted_id
    logger.info(
        "application_submitted",
        application_id=str(result.inserted_id),
        project_id=project_id,
        slot_id=slot_id,
        user_id=user_id,
    )
    return serialize_application(application_data)


async def cancel_application(db, application_id: str, user_id: str) -> dict:
    """Withdraw the caller's own pending application."""

    application = await _get_application(db, application_id)

    if application["user_id"] != user_id:
        raise ForbiddenError("You are not allowed to perform this action")

    if application["status"] != PENDING:
        raise InvalidTransitionError(CANCEL_DENIALS[application["status"]])

    async with persistence_guard("cancel_application", application_id=application_id):
        updated = await db.applications.find_one_and_update(
            {"_id": application["_id"], "status": PENDING},
            {"$set": {"status": CANCELLED, "responded_at": datetime.utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

    if updated is None:
        current = await _get_application(db, application_id)
        raise InvalidTransitionError(CANCEL_DENIALS.get(current["status"], "Application is no longer pending"))

    logger.info("application_cancelled", application_id=application_id, user_id=user_id)
    return serialize_application(updated)


async def list_my_applications(db, user_id: str) -> List[dict]:
    applications = await db.applications.find(
        {"user_id": user_id}
    ).sort("applied_at", -1).to_list(500)

    result = []
    for app in applications:
        item = serialize_application(app)
        project = None
        if ObjectId.is_valid(app["project_id"]):
            project = await db.projects.find_one(
                {"_id": ObjectId(app["project_id"])}, {"title": 1}
            )
        item["project_title"] = project.get("title") if project else None
        result.append(item)

    return result


# ===========================
# OWNER OPERATIONS
# ===========================

async def list_project_applications(db, project_id: str, owner_id: str,
                                    status: Optional[str] = None) -> List[dict]:
    project = await _get_project(db, project_id)
    _ensure_owner(project, owner_id)

    query = {"project_id": project_id}
    if status:
        query["status"] = status

    applications = await db.applications.find(query).sort("applied_at", -1).to_list(1000)

    result = []
    for app in applications:
        item = serialize_application(app)
        applicant = await db.users.find_one({"_id": ObjectId(app["user_id"])})
        item["applicant_username"] = applicant.get("username") if applicant else None
        item["applicant_email"] = applicant.get("email") if applicant else None
        item["applicant_name"] = (
            applicant.get("profile", {}).get("name") if applicant else None
        )
        result.append(item)

    return result


async def reject_application(db, application_id: str, owner_id: str) -> dict:
    """Owner turns down a pending application. The slot is untouched."""

    application = await _get_application(db, application_id)
    project = await _get_project(db, application["project_id"])
    _ensure_owner(project, owner_id)

    if application["status"] != PENDING:
        raise InvalidTransitionError(REJECT_DENIALS[application["status"]])

    async with persistence_guard("reject_application", application_id=application_id):
        updated = await db.applications.find_one_and_update(
            {"_id": application["_id"], "status": PENDING},
            {"$set": {"status": REJECTED, "responded_at": datetime.utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

    if updated is None:
        current = await _get_application(db, application_id)
        raise InvalidTransitionError(REJECT_DENIALS.get(current["status"], "Application is no longer pending"))

    logger.info("application_rejected", application_id=application_id, owner_id=owner_id)
    return serialize_application(updated)


async def accept_application(db, application_id: str, owner_id: str,
                             max_attempts: Optional[int] = None) -> dict:
    """
    Owner admits the applicant to the slot.

    1. Admit the user to the slot (compare-and-swap on the project version,
       re-validating quota after every lost race).
    2. Claim the application (pending -> accepted). If the applicant cancelled
       in between, the admission is rolled back.
    3. If the slot is now full, reject every other pending application to it.
    """
    max_attempts = max_attempts or ACCEPT_MAX_ATTEMPTS

    application = await _get_application(db, application_id)
    project = await _get_project(db, application["project_id"])
    _ensure_owner(project, owner_id)

    if application["status"] != PENDING:
        raise InvalidTransitionError(ACCEPT_DENIALS[application["status"]])

    project_id = application["project_id"]
    slot_id = application["slot_id"]
    user_id = application["user_id"]

    for attempt in range(1, max_attempts + 1):
        slot = find_slot(project, slot_id)
        if not slot:
            raise NotFoundError("Slot not found")

        filled = len(slot.get("filled_by", []))
        if not has_capacity(slot):
            raise QuotaExceededError(
                f"The quota for this slot is full ({filled}/{slot['quota']})"
            )

        if user_id in slot.get("filled_by", []):
            raise InvalidTransitionError(
                "This user has already been accepted for this slot",
                code="slot.already_filled",
            )

        slots = with_member(project["slots"], slot_id, user_id)
        async with persistence_guard("admit_to_slot", project_id=project_id, slot_id=slot_id):
            admitted = await swap_slots(db, project, slots)
        if admitted:
            break

        logger.warning(
            "slot_admission_conflict",
            project_id=project_id,
            slot_id=slot_id,
            attempt=attempt,
        )
        project = await _get_project(db, project_id)
    else:
        raise ConflictError("The slot is being updated concurrently, please retry")

    now = datetime.utcnow()
    async with persistence_guard("accept_application", application_id=application_id):
        updated = await db.applications.find_one_and_update(
            {"_id": application["_id"], "status": PENDING},
            {"$set": {"status": ACCEPTED, "responded_at": now}},
            return_document=ReturnDocument.AFTER,
        )

    if updated is None:
        await _release_member(db, project_id, slot_id, user_id)
        current = await _get_application(db, application_id)
        raise InvalidTransitionError(
            ACCEPT_DENIALS.get(current["status"], "Application is no longer pending")
        )

    admitted_slot = find_slot({"slots": slots}, slot_id)
    cascaded = 0
    if slot_status(admitted_slot) == "filled":
        cascaded = await reject_pending_for_slot(db, project_id, slot_id, responded_at=now)

    logger.info(
        "application_accepted",
        application_id=application_id,
        project_id=project_id,
        slot_id=slot_id,
        user_id=user_id,
        slot_filled=slot_status(admitted_slot) == "filled",
        cascade_rejected=cascaded,
    )
    return serialize_application(updated)


async def cancel_pending_for_project(db, project_id: str, slot_id: Optional[str] = None) -> int:
    """Close pending applications whose project or slot was removed."""
    query = {"project_id": project_id, "status": PENDING}
    if slot_id:
        query["slot_id"] = slot_id

    async with persistence_guard("cancel_pending", project_id=project_id, slot_id=slot_id):
        result = await db.applications.update_many(
            query,
            {"$set": {"status": CANCELLED, "responded_at": datetime.utcnow()}},
        )
    if result.modified_count:
        logger.info(
            "pending_applications_closed",
            project_id=project_id,
            slot_id=slot_id,
            count=result.modified_count,
        )
    return result.modified_count


async def reject_pending_for_slot(db, project_id: str, slot_id: str,
                                  responded_at: Optional[datetime] = None) -> int:
    """Reject every pending application to a slot that has just filled up."""
    async with persistence_guard("cascade_reject", project_id=project_id, slot_id=slot_id):
        result = await db.applications.update_many(
            {"project_id": project_id, "slot_id": slot_id, "status": PENDING},
            {"$set": {"status": REJECTED, "responded_at": responded_at or datetime.utcnow()}},
        )
    return result.modified_count
