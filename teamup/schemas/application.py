# ========================================
# teamup/schemas/application.py
# ========================================

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from teamup.models.application import ApplicationStatus

# 1. Input: Apply to a slot (accepts projectId/slotId as sent by the web client)
class ApplicationCreate(BaseModel):
    project_id: str = Field(..., alias="projectId")
    slot_id: str = Field(..., alias="slotId")
    message: Optional[str] = Field(None, max_length=1000)

    class Config:
        populate_by_name = True

# 2. Output: Application record
class ApplicationResponse(BaseModel):
    id: str
    project_id: str
    slot_id: str
    user_id: str
    role_name: str
    message: Optional[str] = None
    status: ApplicationStatus
    applied_at: datetime
    responded_at: Optional[datetime] = None

# 3. Output: Applicant's view with project title
class MyApplicationResponse(ApplicationResponse):
    project_title: Optional[str] = None

# 4. Output: Owner's view with applicant summary
class ProjectApplicationResponse(ApplicationResponse):
    applicant_username: Optional[str] = None
    applicant_email: Optional[str] = None
    applicant_name: Optional[str] = None

# 5. Output: Envelope used by the mutating endpoints
class ApplicationEnvelope(BaseModel):
    message: str
    application: ApplicationResponse

