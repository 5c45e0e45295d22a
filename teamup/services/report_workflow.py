# ========================================
# teamup/services/report_workflow.py - MODERATION REPORTS
# ========================================
"""
Lifecycle of a moderation report.

    pending -> resolved | rejected | cancelled     (all three are terminal)

The reporter may cancel; admins resolve (with an action) or reject.
"""

import math
from datetime import datetime
from typing import Optional

import structlog
from bson import ObjectId
from pymongo import ReturnDocument

from teamup.models.report import (
    CONTENT_COLLECTIONS,
    REPORT_REASONS,
    REPORT_STATES,
    REPORT_TYPES,
    UNTARGETED_TYPES,
)
from teamup.utils.errors import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    TeamUpError,
)

logger = structlog.get_logger()


class InvalidReportError(TeamUpError):
    status_code = 400
    code = "report.invalid"


def serialize_report(report: dict) -> dict:
    status = report.get("status", {})
    return {
        "id": str(report["_id"]),
        "reporter_id": report["reporter_id"],
        "report_type": report["report_type"],
        "content_id": report.get("content_id"),
        "reason": report.get("reason"),
        "description": report.get("description"),
        "status": {
            "is_resolved": status.get("is_resolved", False),
            "state": status.get("state", "pending"),
            "resolved_at": status.get("resolved_at"),
            "resolved_by": status.get("resolved_by"),
            "action_taken": status.get("action_taken", "none"),
            "admin_note": status.get("admin_note"),
        },
        "created_at": report.get("created_at"),
    }


async def _get_report(db, report_id: str) -> dict:
    report = None
    if ObjectId.is_valid(report_id):
        report = await db.reports.find_one({"_id": ObjectId(report_id)})
    if not report:
        raise NotFoundError("Report not found")
    return report


async def _transition(db, report: dict, new_fields: dict) -> dict:
    """Move a pending report to a terminal state."""
    if report["status"]["state"] != "pending":
        raise InvalidTransitionError("Only pending reports can be changed")

    updated = await db.reports.find_one_and_update(
        {"_id": report["_id"], "status.state": "pending"},
        {"$set": {f"status.{key}": value for key, value in new_fields.items()}},
        return_document=ReturnDocument.AFTER,
    )
    if updated is None:
        raise InvalidTransitionError("Only pending reports can be changed")
    return updated


async def create_report(db, reporter_id: str, report_type: str, content_id: Optional[str],
                        reason: Optional[str], description: Optional[str]) -> dict:
    if report_type not in REPORT_TYPES:
        raise InvalidReportError(
            "Invalid report type. Allowed: " + ", ".join(REPORT_TYPES)
        )

    if report_type not in UNTARGETED_TYPES:
        if not content_id:
            raise InvalidReportError("content_id is required")
        if not ObjectId.is_valid(content_id):
            raise InvalidReportError("Invalid content ID")
        if not reason or reason not in REPORT_REASONS:
            raise InvalidReportError(
                "Invalid report reason. Allowed: " + ", ".join(REPORT_REASONS)
            )

        collection = db[CONTENT_COLLECTIONS[report_type]]
        if not await collection.find_one({"_id": ObjectId(content_id)}, {"_id": 1}):
            raise NotFoundError("Reported content not found")

    if content_id:
        already = await db.reports.find_one({
            "reporter_id": reporter_id,
            "report_type": report_type,
            "content_id": content_id
        })
        if already:
            raise ConflictError("You have already reported this content")

    report_data = {
        "reporter_id": reporter_id,
        "report_type": report_type,
        "content_id": content_id,
        "reason": reason,
        "description": description,
        "status": {
            "is_resolved": False,
            "state": "pending",
            "resolved_at": None,
            "resolved_by": None,
            "action_taken": "none",
            "admin_note": None,
        },
        "created_at": datetime.utcnow()
    }
    result = await db.reports.insert_one(report_data)
    report_data["_id"] = result.inserted_id

    logger.info("report_created", report_id=str(result.inserted_id), report_type=report_type)
    return serialize_report(report_data)


async def list_my_reports(db, reporter_id: str, page: int = 1, limit: int = 10,
                          report_type: Optional[str] = None) -> dict:
    query = {"reporter_id": reporter_id}
    if report_type:
        query["report_type"] = report_type

    skip = (page - 1) * limit
    reports = await db.reports.find(query).sort("created_at", -1).skip(skip).limit(limit).to_list(limit)
    total = await db.reports.count_documents(query)

    return {
        "reports": [serialize_report(r) for r in reports],
        "total_reports": total,
        "page": page,
        "limit": limit
    }


async def get_report(db, report_id: str, user: dict) -> dict:
    report = await _get_report(db, report_id)
    if user.get("role") != "admin" and report["reporter_id"] != str(user["_id"]):
        raise ForbiddenError("You are not allowed to view this report")
    return serialize_report(report)


async def cancel_report(db, report_id: str, reporter_id: str) -> dict:
    report = await _get_report(db, report_id)
    if report["reporter_id"] != reporter_id:
        raise NotFoundError("Report not found")

    updated = await _transition(db, report, {"state": "cancelled"})
    logger.info("report_cancelled", report_id=report_id)
    return serialize_report(updated)


async def resolve_report(db, report_id: str, admin_id: str, action_taken: str = "none",
                         admin_note: Optional[str] = None) -> dict:
    report = await _get_report(db, report_id)
    updated = await _transition(db, report, {
        "is_resolved": True,
        "state": "resolved",
        "resolved_at": datetime.utcnow(),
        "resolved_by": admin_id,
        "action_taken": action_taken or "none",
        "admin_note": admin_note or "",
    })
    logger.info("report_resolved", report_id=report_id, action_taken=action_taken, admin_id=admin_id)
    return serialize_report(updated)


async def reject_report(db, report_id: str, admin_id: str, admin_note: Optional[str] = None) -> dict:
    report = await _get_report(db, report_id)
    updated = await _transition(db, report, {
        "state": "rejected",
        "resolved_at": datetime.utcnow(),
        "resolved_by": admin_id,
        "admin_note": admin_note or "",
    })
    logger.info("report_rejected", report_id=report_id, admin_id=admin_id)
    return serialize_report(updated)


async def list_all_reports(db, page: int = 1, limit: int = 10, report_type: Optional[str] = None,
                           state: Optional[str] = None, action_taken: Optional[str] = None,
                           from_date: Optional[datetime] = None, to_date: Optional[datetime] = None,
                           sort_by: Optional[str] = None) -> dict:
    query = {}
    if report_type:
        query["report_type"] = report_type
    if state:
        query["status.state"] = state
    if action_taken:
        query["status.action_taken"] = action_taken

    date_filter = {}
    if from_date:
        date_filter["$gte"] = from_date
    if to_date:
        date_filter["$lte"] = to_date
    if date_filter:
        query["created_at"] = date_filter

    sort_field, sort_order = "created_at", -1
    if sort_by == "resolved":
        sort_field = "status.resolved_at"
    elif sort_by == "oldest":
        sort_order = 1

    skip = (page - 1) * limit
    reports = await db.reports.find(query).sort(sort_field, sort_order).skip(skip).limit(limit).to_list(limit)
    total = await db.reports.count_documents(query)

    statistics = {}
    for report_state in REPORT_STATES:
        statistics[report_state] = await db.reports.count_documents({"status.state": report_state})
    statistics["total"] = sum(statistics.values())

    return {
        "reports": [serialize_report(r) for r in reports],
        "pagination": {
            "current_page": page,
            "limit": limit,
            "total_reports": total,
            "total_pages": math.ceil(total / limit)
        },
        "statistics": statistics
    }
