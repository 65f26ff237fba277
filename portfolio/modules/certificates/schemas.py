from pydantic import BaseModel
from typing import Optional
from datetime import date as calendar_date, datetime

from portfolio.modules.resources.schema import ResourceSchema, FieldSpec, TEXT, LONG_TEXT, DATE, IMAGE


class CertificateCreate(BaseModel):
    title: str
    institution: str
    date: str
    image_url: Optional[str] = None  # may come later as an uploaded file
    description: Optional[str] = None


class CertificateUpdate(BaseModel):
    title: Optional[str] = None
    institution: Optional[str] = None
    date: Optional[str] = None
    image_url: Optional[str] = None
    description: Optional[str] = None


class CertificateResponse(BaseModel):
    id: str
    title: str
    institution: str
    date: calendar_date
    image_url: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


CERTIFICATE_RESOURCE = ResourceSchema(
    name="certificates",
    table="certificates",
    label="Certificate",
    fields=(
        FieldSpec("title", TEXT, required=True),
        FieldSpec("institution", TEXT, required=True),
        FieldSpec("date", DATE, required=True),
        FieldSpec("image_url", IMAGE, label="Image", required=True),
        FieldSpec("description", LONG_TEXT),
    ),
    record_model=CertificateResponse,
    create_model=CertificateCreate,
    update_model=CertificateUpdate,
    order_by="date",
    ascending=False,
)
