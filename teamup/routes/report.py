# ========================================
# teamup/routes/report.py
# ========================================

from fastapi import APIRouter, Depends, HTTPException, Query
from bson import ObjectId
from datetime import datetime
from typing import Optional

from teamup.database import get_db
from teamup.schemas.report import (
    ReportCreate,
    ReportResolve,
    ReportReject,
    ReportEnvelope,
    ReportResponse,
    MyReportsResponse,
    AdminReportsResponse,
)
from teamup.services import report_workflow
from teamup.utils.auth import get_current_user, admin_required

router = APIRouter(prefix="/reports", tags=["Reports"])


def _validate_report_id(report_id: str):
    if not ObjectId.is_valid(report_id):
        raise HTTPException(status_code=400, detail="Invalid report ID")


# ===========================
# USER ENDPOINTS
# ===========================

# ✅ 1. CREATE REPORT
@router.post("", response_model=ReportEnvelope, status_code=201)
async def create_report(report: ReportCreate, current_user: dict = Depends(get_current_user)):
    """Report a post, comment, project, user, application or something else."""

    db = get_db()
    created = await report_workflow.create_report(
        db,
        reporter_id=str(current_user["_id"]),
        report_type=report.report_type,
        content_id=report.content_id,
        reason=report.reason,
        description=report.description,
    )
    return {"message": "Report created", "report": created}


# ✅ 2. GET MY REPORTS
@router.get("/my-reports", response_model=MyReportsResponse)
async def get_my_reports(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    report_type: Optional[str] = Query(None),
    current_user: dict = Depends(get_current_user)
):
    """Reports filed by the current user, newest first."""

    db = get_db()
    return await report_workflow.list_my_reports(
        db, str(current_user["_id"]), page=page, limit=limit, report_type=report_type
    )


# ===========================
# ADMIN ENDPOINTS
# ===========================

# ✅ 3. LIST ALL REPORTS WITH STATISTICS
@router.get("/admin", response_model=AdminReportsResponse)
async def get_all_reports(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    report_type: Optional[str] = Query(None),
    status: Optional[str] = Query(None, description="pending, resolved, rejected, cancelled"),
    action_taken: Optional[str] = Query(None),
    from_date: Optional[datetime] = Query(None),
    to_date: Optional[datetime] = Query(None),
    sort_by: Optional[str] = Query(None, description="newest (default), oldest or resolved"),
    current_user: dict = Depends(admin_required)
):
    """All reports with filters, pagination and per-state counts. Admin only."""

    db = get_db()
    return await report_workflow.list_all_reports(
        db,
        page=page,
        limit=limit,
        report_type=report_type,
        state=status,
        action_taken=action_taken,
        from_date=from_date,
        to_date=to_date,
        sort_by=sort_by,
    )


# ✅ 4. RESOLVE REPORT
@router.patch("/resolve/{report_id}", response_model=ReportEnvelope)
async def resolve_report(
    report_id: str,
    decision: ReportResolve,
    current_user: dict = Depends(admin_required)
):
    """Resolve a pending report, recording the action taken. Admin only."""

    _validate_report_id(report_id)

    db = get_db()
    resolved = await report_workflow.resolve_report(
        db,
        report_id,
        admin_id=str(current_user["_id"]),
        action_taken=decision.action_taken,
        admin_note=decision.admin_note,
    )
    return {"message": "Report resolved", "report": resolved}


# ✅ 5. REJECT REPORT
@router.patch("/reject/{report_id}", response_model=ReportEnvelope)
async def reject_report(
    report_id: str,
    decision: ReportReject,
    current_user: dict = Depends(admin_required)
):
    """Dismiss a pending report. Admin only."""

    _validate_report_id(report_id)

    db = get_db()
    rejected = await report_workflow.reject_report(
        db, report_id, admin_id=str(current_user["_id"]), admin_note=decision.admin_note
    )
    return {"message": "Report rejected", "report": rejected}


# ===========================
# REPORTER / ADMIN ENDPOINTS
# ===========================

# ✅ 6. CANCEL MY REPORT
@router.post("/cancel/{report_id}", response_model=ReportEnvelope)
async def cancel_report(report_id: str, current_user: dict = Depends(get_current_user)):
    """Withdraw one of your pending reports."""

    _validate_report_id(report_id)

    db = get_db()
    cancelled = await report_workflow.cancel_report(db, report_id, str(current_user["_id"]))
    return {"message": "Report cancelled", "report": cancelled}


# ✅ 7. GET REPORT
@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(report_id: str, current_user: dict = Depends(get_current_user)):
    """A single report. Visible to its reporter and to admins."""

    _validate_report_id(report_id)

    db = get_db()
    return await report_workflow.get_report(db, report_id, current_user)
