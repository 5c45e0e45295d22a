from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from datetime import datetime

# 1. For Registration (Input)
class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=30)
    name: str = Field(..., min_length=2, max_length=30)
    surname: str = Field(..., min_length=2, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=6)

# 2. For Login (Input)
class UserLogin(BaseModel):
    email: str
    password: str

# 3. For Refresh / Logout (Input)
class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., alias="refreshToken")

    class Config:
        populate_by_name = True

# 4. For Responses (Output)
class Profile(BaseModel):
    name: Optional[str] = None
    surname: Optional[str] = None
    bio: Optional[str] = ""
    avatar_url: Optional[str] = ""
    location: Optional[str] = ""

class SocialLinks(BaseModel):
    github: Optional[str] = ""
    linkedin: Optional[str] = ""
    portfolio: Optional[str] = ""

class UserResponse(BaseModel):
    id: str
    username: str
    email: EmailStr
    role: str
    profile: Profile
    # A new user will not have these yet
    social_links: Optional[SocialLinks] = None
    titles: List[str] = []
    skills: List[str] = []
    created_at: Optional[datetime] = None

class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str

class AuthResponse(BaseModel):
    message: str
    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str

# 5. For Updating Profile (Input)
class ProfileUpdate(BaseModel):
    bio: Optional[str] = Field(None, max_length=160)
    avatar_url: Optional[str] = None
    location: Optional[str] = None

class UserProfileUpdate(BaseModel):
    profile: Optional[ProfileUpdate] = None
    social_links: Optional[SocialLinks] = None
    titles: Optional[List[str]] = None
    skills: Optional[List[str]] = None
