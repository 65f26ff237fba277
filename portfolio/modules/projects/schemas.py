from pydantic import BaseModel, field_validator
from typing import Optional, List
from datetime import datetime

from portfolio.modules.resources.schema import (
    ResourceSchema, FieldSpec, TEXT, LONG_TEXT, URL, BOOL, CHOICE, TAGS, IMAGE,
)

PROJECT_CATEGORIES = {
    "programming": "Programming",
    "database": "Databases",
    "design": "Design",
    "networks": "Networks & Security",
    "tools": "Tools",
}


class ProjectCreate(BaseModel):
    title: str
    description: str
    category: str
    technologies: List[str] = []
    image_url: Optional[str] = None
    demo_url: Optional[str] = None
    github_url: Optional[str] = None
    featured: bool = False


class ProjectUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    technologies: Optional[List[str]] = None
    image_url: Optional[str] = None
    demo_url: Optional[str] = None
    github_url: Optional[str] = None
    featured: Optional[bool] = None


class ProjectResponse(BaseModel):
    id: str
    title: str
    description: str
    category: str
    technologies: List[str] = []
    image_url: Optional[str] = None
    demo_url: Optional[str] = None
    github_url: Optional[str] = None
    featured: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("technologies", mode="before")
    @classmethod
    def null_list_is_empty(cls, value):
        return [] if value is None else value

    @field_validator("featured", mode="before")
    @classmethod
    def null_flag_is_false(cls, value):
        return False if value is None else value

    class Config:
        from_attributes = True


PROJECT_RESOURCE = ResourceSchema(
    name="projects",
    table="projects",
    label="Project",
    fields=(
        FieldSpec("title", TEXT, required=True),
        FieldSpec("description", LONG_TEXT, required=True),
        FieldSpec("category", CHOICE, required=True, choices=tuple(PROJECT_CATEGORIES)),
        FieldSpec("technologies", TAGS),
        FieldSpec("image_url", IMAGE, label="Image"),
        FieldSpec("demo_url", URL, label="Demo URL"),
        FieldSpec("github_url", URL, label="Repository URL"),
        FieldSpec("featured", BOOL),
    ),
    record_model=ProjectResponse,
    create_model=ProjectCreate,
    update_model=ProjectUpdate,
    order_by="created_at",
    ascending=False,
)
