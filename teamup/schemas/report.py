# ========================================
# teamup/schemas/report.py
# ========================================

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from teamup.models.report import ActionTaken, ReportState

# 1. Input: Create report (type and reason are checked by the workflow)
class ReportCreate(BaseModel):
    report_type: str = Field(..., alias="reportType")
    content_id: Optional[str] = Field(None, alias="contentId")
    reason: Optional[str] = None
    description: Optional[str] = Field(None, max_length=1000)

    class Config:
        populate_by_name = True

# 2. Input: Admin decisions
class ReportResolve(BaseModel):
    action_taken: ActionTaken = Field("none", alias="actionTaken")
    admin_note: Optional[str] = Field(None, alias="adminNote", max_length=1000)

    class Config:
        populate_by_name = True

class ReportReject(BaseModel):
    admin_note: Optional[str] = Field(None, alias="adminNote", max_length=1000)

    class Config:
        populate_by_name = True

# 3. Output
class ReportStatus(BaseModel):
    is_resolved: bool = False
    state: ReportState
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None
    action_taken: str = "none"
    admin_note: Optional[str] = None

class ReportResponse(BaseModel):
    id: str
    reporter_id: str
    report_type: str
    content_id: Optional[str] = None
    reason: Optional[str] = None
    description: Optional[str] = None
    status: ReportStatus
    created_at: Optional[datetime] = None

class ReportEnvelope(BaseModel):
    message: str
    report: ReportResponse

class MyReportsResponse(BaseModel):
    reports: List[ReportResponse]
    total_reports: int
    page: int
    limit: int

class ReportPagination(BaseModel):
    current_page: int
    limit: int
    total_reports: int
    total_pages: int

class ReportStatistics(BaseModel):
    pending: int
    resolved: int
    rejected: int
    cancelled: int
    total: int

class AdminReportsResponse(BaseModel):
    reports: List[ReportResponse]
    pagination: ReportPagination
    statistics: ReportStatistics
