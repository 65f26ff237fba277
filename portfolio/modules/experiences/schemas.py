from pydantic import BaseModel, field_validator
from typing import Optional, List
from datetime import date, datetime

from portfolio.modules.resources.schema import ResourceSchema, FieldSpec, TEXT, LONG_TEXT, DATE, TAGS, ITEMS


class ExperienceCreate(BaseModel):
    company: str
    position: str
    description: str
    start_date: str
    end_date: Optional[str] = None  # empty means current position
    technologies: List[str] = []
    achievements: List[str] = []


class ExperienceUpdate(BaseModel):
    company: Optional[str] = None
    position: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    technologies: Optional[List[str]] = None
    achievements: Optional[List[str]] = None


class ExperienceResponse(BaseModel):
    id: str
    company: str
    position: str
    description: str
    start_date: date
    end_date: Optional[date] = None
    technologies: List[str] = []
    achievements: List[str] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("technologies", "achievements", mode="before")
    @classmethod
    def null_list_is_empty(cls, value):
        return [] if value is None else value

    @property
    def is_current(self) -> bool:
        return self.end_date is None

    class Config:
        from_attributes = True


EXPERIENCE_RESOURCE = ResourceSchema(
    name="experiences",
    table="experiences",
    label="Experience",
    fields=(
        FieldSpec("company", TEXT, required=True),
        FieldSpec("position", TEXT, required=True),
        FieldSpec("description", LONG_TEXT, required=True),
        FieldSpec("start_date", DATE, label="Start date", required=True),
        FieldSpec("end_date", DATE, label="End date"),
        FieldSpec("technologies", TAGS),
        FieldSpec("achievements", ITEMS),
    ),
    record_model=ExperienceResponse,
    create_model=ExperienceCreate,
    update_model=ExperienceUpdate,
    order_by="start_date",
    ascending=False,
)
