# ========================================
# teamup/schemas/project.py
# ========================================

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from teamup.models.project import ProjectCategory, ProjectStatus, ProjectType, SlotStatus

# 1. Input: Slot definition
class SlotCreate(BaseModel):
    role_name: str = Field(..., alias="roleName", min_length=1)
    required_skills: List[str] = Field(..., alias="requiredSkills")
    optional_skills: List[str] = Field(default_factory=list, alias="optionalSkills")
    quota: int = Field(..., ge=1)

    class Config:
        populate_by_name = True

# 2. Input: Slot update (status is derived, never sent)
class SlotUpdate(BaseModel):
    role_name: Optional[str] = Field(None, alias="roleName", min_length=1)
    required_skills: Optional[List[str]] = Field(None, alias="requiredSkills")
    optional_skills: Optional[List[str]] = Field(None, alias="optionalSkills")
    quota: Optional[int] = Field(None, ge=1)

    class Config:
        populate_by_name = True

# 3. Input: Create project
class ProjectCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=100)
    description: Optional[str] = Field(None, min_length=20, max_length=500)
    category: ProjectCategory
    project_type: ProjectType = Field("personal", alias="projectType")
    slots: List[SlotCreate] = []

    class Config:
        populate_by_name = True

# 4. Input: Update project
class ProjectUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, min_length=20, max_length=500)
    category: Optional[ProjectCategory] = None
    project_type: Optional[ProjectType] = Field(None, alias="projectType")
    status: Optional[ProjectStatus] = None

    class Config:
        populate_by_name = True

# 5. Output: Slot
class SlotResponse(BaseModel):
    id: str
    role_name: str
    required_skills: List[str]
    optional_skills: List[str] = []
    quota: int
    status: SlotStatus
    filled_by: List[str] = []

# 6. Output: Owner summary
class OwnerSummary(BaseModel):
    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    profile: Optional[dict] = None

# 7. Output: Project
class ProjectResponse(BaseModel):
    id: str
    owner_id: str
    owner: Optional[OwnerSummary] = None
    title: str
    description: Optional[str] = None
    category: str
    status: str
    project_type: str
    slots: List[SlotResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class ProjectListResponse(BaseModel):
    total: int
    data: List[ProjectResponse]
    message: Optional[str] = None

class ProjectEnvelope(BaseModel):
    message: str
    project: ProjectResponse
