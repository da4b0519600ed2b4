from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Literal, Optional, Tuple
from datetime import datetime


# matches ProblemTag.tag
MAX_TAG_LENGTH = 50


def _normalize_tags(tags: Optional[List[str]]) -> List[str]:
    cleaned = []
    for tag in tags or []:
        tag = (tag or "").strip().lower()
        if len(tag) > MAX_TAG_LENGTH:
            raise ValueError(f"Tags must be at most {MAX_TAG_LENGTH} characters")
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


def _check_title(value: Optional[str]) -> str:
    value = (value or "").strip()
    if len(value) < 10 or len(value) > 200:
        raise ValueError("Title must be between 10 and 200 characters")
    return value


def _check_description(value: Optional[str]) -> str:
    if value is None or len(value) < 20:
        raise ValueError("Description must be at least 20 characters")
    return value


def _check_content(value: Optional[str]) -> str:
    if value is None or len(value) < 20:
        raise ValueError("Solution must be at least 20 characters")
    return value


# ---------- auth ----------

class RegisterRequest(BaseModel):
    username: str
    email: EmailStr
    password: str

    @field_validator("username")
    @classmethod
    def username_length(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3 or len(v) > 30:
            raise ValueError("Username must be between 3 and 30 characters")
        return v

    @field_validator("email")
    @classmethod
    def email_lower(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v

    class Config:
        extra = "forbid"


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    class Config:
        extra = "forbid"


# ---------- users ----------

class UserPublic(BaseModel):
    id: int
    username: str
    avatar: Optional[str] = None
    reputation: int = 0

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    bio: Optional[str] = None
    avatar: Optional[str] = None
    reputation: int = 0
    created_at: datetime

    class Config:
        from_attributes = True


class UserEnvelope(BaseModel):
    user: UserResponse


class ProfileUpdate(BaseModel):
    bio: Optional[str] = Field(default=None, max_length=500)
    avatar: Optional[str] = None

    class Config:
        extra = "forbid"


# ---------- problems ----------

class Location(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: Tuple[float, float]   # (lng, lat)
    address: Optional[str] = None


class ProblemCreate(BaseModel):
    title: str
    description: str
    images: List[str] = []
    tags: List[str] = []
    location: Optional[Location] = None

    @field_validator("title")
    @classmethod
    def title_length(cls, v):
        return _check_title(v)

    @field_validator("description")
    @classmethod
    def description_length(cls, v):
        return _check_description(v)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return _normalize_tags(v)

    class Config:
        extra = "forbid"


class ProblemUpdate(BaseModel):
    """Only these fields may be patched; anything else rejects the whole body."""
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[Literal["open", "solved", "closed"]] = None

    @field_validator("title")
    @classmethod
    def title_length(cls, v):
        return _check_title(v)

    @field_validator("description")
    @classmethod
    def description_length(cls, v):
        return _check_description(v)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return _normalize_tags(v)

    class Config:
        extra = "forbid"


class ProblemBrief(BaseModel):
    id: int
    title: str
    description: str
    status: str

    class Config:
        from_attributes = True


class ProblemOut(BaseModel):
    id: int
    title: str
    description: str
    images: List[str] = []
    tags: List[str] = []
    location: Optional[Location] = None
    author: UserPublic
    status: str
    accepted_solution_id: Optional[int] = None
    views: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class ProblemEnvelope(BaseModel):
    problem: ProblemOut


class ProblemListOut(BaseModel):
    problems: List[ProblemOut]
    pagination: Pagination


# ---------- solutions ----------

class SolutionCreate(BaseModel):
    content: str
    images: List[str] = []

    @field_validator("content")
    @classmethod
    def content_length(cls, v):
        return _check_content(v)

    class Config:
        extra = "forbid"


class SolutionUpdate(BaseModel):
    content: Optional[str] = None
    images: Optional[List[str]] = None

    @field_validator("content")
    @classmethod
    def content_length(cls, v):
        return _check_content(v)

    class Config:
        extra = "forbid"


class SolutionOut(BaseModel):
    id: int
    problem_id: int
    author: UserPublic
    content: str
    images: List[str] = []
    upvotes: int = 0
    downvotes: int = 0
    is_accepted: bool = False
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SolutionWithProblemOut(SolutionOut):
    problem: ProblemBrief


class SolutionEnvelope(BaseModel):
    solution: SolutionOut


class SolutionListOut(BaseModel):
    solutions: List[SolutionOut]


class SolutionPageOut(BaseModel):
    solutions: List[SolutionWithProblemOut]
    pagination: Pagination


# ---------- votes ----------

class VoteRequest(BaseModel):
    vote_type: str

    class Config:
        extra = "forbid"


class VoteResult(BaseModel):
    message: str
    upvotes: int
    downvotes: int


class UserVoteOut(BaseModel):
    user_vote: Optional[Literal["upvote", "downvote"]] = None


# ---------- profiles / admin ----------

class ProfileStats(BaseModel):
    problem_count: int
    solution_count: int
    accepted_solution_count: int


class UserProfile(UserPublic):
    bio: Optional[str] = None
    created_at: datetime


class UserProfileOut(BaseModel):
    user: UserProfile
    problems: List[ProblemBrief]
    solutions: List[SolutionWithProblemOut]
    stats: ProfileStats


class SiteStats(BaseModel):
    total_users: int
    total_problems: int
    total_solutions: int
    solved_problems: int
    open_problems: int


class AdminStatsOut(BaseModel):
    stats: SiteStats
    recent_problems: List[ProblemOut]
    recent_solutions: List[SolutionWithProblemOut]
    top_users: List[UserPublic]


class MessageResponse(BaseModel):
    message: str


class AvatarRemovedOut(BaseModel):
    message: str
    user: UserResponse
