"""
Request and Response models for the article and account API.

Field names follow the JSON the client already consumes: article and
profile rows keep their column names, while the session identity and
the doctor profile envelope use camelCase keys.
"""
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field


class ArticleResponse(BaseModel):
    """One article row."""
    id: int
    doctor_id: int
    title: str
    subtitle: str
    text: str
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    first: Optional[str] = Field(default=None, description="Author first name")
    last: Optional[str] = Field(default=None, description="Author last name")
    lowest_id: Optional[int] = Field(
        default=None,
        description="Smallest article id in this feed; the last page contains it"
    )


class DoctorProfile(BaseModel):
    """Doctor row as shown on a profile page."""
    id: int
    first: str
    last: str
    specialty: Optional[str] = None
    bio: Optional[str] = None
    image_url: Optional[str] = None
    doctor: bool = True
    created_at: Optional[datetime] = None
    email: Optional[str] = None


class DoctorProfileResponse(BaseModel):
    """Doctor profile plus whether the viewer is that doctor."""
    doctorInfo: DoctorProfile
    ownProfile: bool


class UserProfile(BaseModel):
    """User row as shown to its owner."""
    id: int
    first: str
    last: str
    email: Optional[str] = None
    doctor: bool = False
    created_at: Optional[datetime] = None


class SessionIdentity(BaseModel):
    """Identity stored in the session cookie."""
    userId: Optional[int] = None
    doctor: Optional[bool] = None


class EditArticleTextRequest(BaseModel):
    """
    Body of /edit-article-text.json.

    Every field is optional here so that missing values produce the
    article validation message instead of a schema error.
    """
    articleId: Optional[Union[int, str]] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    text: Optional[str] = None
