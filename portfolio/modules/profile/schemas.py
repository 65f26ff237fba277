from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from portfolio.modules.resources.schema import ResourceSchema, FieldSpec, TEXT, LONG_TEXT, EMAIL, URL, IMAGE

# Shown on the public site and preloaded in the admin editor until a profile row exists
DEFAULT_PROFILE = {
    "name": "Your Name",
    "title": "Software Engineer",
    "bio": "Software engineer focused on web development, security and infrastructure.",
    "email": "hello@example.com",
    "phone": "",
    "location": "",
    "linkedin_url": "",
    "github_url": "",
    "profile_image_url": "",
    "cv_url": "",
}


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    title: Optional[str] = None
    bio: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    profile_image_url: Optional[str] = None
    cv_url: Optional[str] = None


class ProfileResponse(BaseModel):
    id: str
    name: str
    title: str
    bio: str
    email: str
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    profile_image_url: Optional[str] = None
    cv_url: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


PROFILE_RESOURCE = ResourceSchema(
    name="profile",
    table="profiles",
    label="Profile",
    fields=(
        FieldSpec("name", TEXT, required=True),
        FieldSpec("title", TEXT, required=True),
        FieldSpec("bio", LONG_TEXT, label="Biography", required=True),
        FieldSpec("email", EMAIL, required=True),
        FieldSpec("phone", TEXT),
        FieldSpec("location", TEXT),
        FieldSpec("linkedin_url", URL, label="LinkedIn URL"),
        FieldSpec("github_url", URL, label="GitHub URL"),
        FieldSpec("profile_image_url", IMAGE, label="Profile image"),
        FieldSpec("cv_url", URL, label="CV URL"),
    ),
    record_model=ProfileResponse,
    create_model=ProfileUpdate,  # the editor saves the whole form; unset fields keep the draft value
    update_model=ProfileUpdate,
    order_by="created_at",
    ascending=True,
    singleton=True,
    defaults=DEFAULT_PROFILE,
)
