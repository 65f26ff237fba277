"""
Resource schema declarations.

A ResourceSchema describes one Supabase table the admin panel can edit: its
fields, which of them are required, how lists are ordered and which pydantic
models shape the stored rows. Repositories, list views, form dialogs and the
route factory are all driven by a schema, so the four resource types share a
single code path.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple, Type
from pydantic import BaseModel

# Field kinds
TEXT = "text"
LONG_TEXT = "long_text"
EMAIL = "email"
URL = "url"
DATE = "date"
BOOL = "bool"
CHOICE = "choice"
TAGS = "tags"    # ordered, unique strings; removed by value
ITEMS = "items"  # ordered free text; removed by position
IMAGE = "image"  # remote URL or inline data URI

LIST_KINDS = (TAGS, ITEMS)


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: str = TEXT
    label: str = ""
    required: bool = False
    choices: Tuple[str, ...] = ()

    @property
    def is_list(self) -> bool:
        return self.kind in LIST_KINDS

    @property
    def display_label(self) -> str:
        return self.label or self.name.replace("_", " ").capitalize()

    def empty_value(self) -> Any:
        if self.is_list:
            return []
        if self.kind == BOOL:
            return False
        return ""


@dataclass(frozen=True)
class ResourceSchema:
    name: str
    table: str
    label: str
    fields: Tuple[FieldSpec, ...]
    record_model: Type[BaseModel]
    create_model: Type[BaseModel]
    update_model: Type[BaseModel]
    order_by: str = "created_at"
    ascending: bool = False
    singleton: bool = False
    defaults: Dict[str, Any] = field(default_factory=dict)

    def get_field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(f"{self.name} has no field '{name}'")

    def has_field(self, name: str) -> bool:
        return any(spec.name == name for spec in self.fields)

    @property
    def field_names(self) -> List[str]:
        return [spec.name for spec in self.fields]

    @property
    def image_field(self) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.kind == IMAGE:
                return spec
        return None

    def empty_draft(self) -> Dict[str, Any]:
        draft = {spec.name: spec.empty_value() for spec in self.fields}
        for name, value in self.defaults.items():
            if name in draft:
                draft[name] = list(value) if isinstance(value, list) else value
        return draft

    def draft_from_record(self, record: BaseModel) -> Dict[str, Any]:
        """Copy a stored record into an editable draft; dates become YYYY-MM-DD."""
        draft = {}
        for spec in self.fields:
            value = getattr(record, spec.name, None)
            if value is None:
                draft[spec.name] = spec.empty_value()
            elif spec.is_list:
                draft[spec.name] = list(value)
            elif spec.kind == DATE:
                draft[spec.name] = normalize_date(value)
            else:
                draft[spec.name] = value
        return draft

    def validate(self, draft: Dict[str, Any]) -> List[str]:
        errors = []
        for spec in self.fields:
            value = draft.get(spec.name)
            if spec.required and is_blank(value):
                errors.append(f"{spec.display_label} is required")
                continue
            if is_blank(value):
                continue
            if spec.kind == CHOICE and spec.choices and value not in spec.choices:
                errors.append(f"{spec.display_label} must be one of: {', '.join(spec.choices)}")
            elif spec.kind == DATE:
                try:
                    date.fromisoformat(normalize_date(value))
                except (TypeError, ValueError):
                    errors.append(f"{spec.display_label} must be a date (YYYY-MM-DD)")
        return errors

    def to_payload(self, draft: Dict[str, Any]) -> Dict[str, Any]:
        """Turn a validated draft into a row for Supabase; blank optionals become null."""
        payload = {}
        for spec in self.fields:
            value = draft.get(spec.name, spec.empty_value())
            if spec.is_list:
                payload[spec.name] = [item for item in (value or [])]
            elif spec.kind == BOOL:
                payload[spec.name] = bool(value)
            elif is_blank(value):
                payload[spec.name] = None
            elif spec.kind == DATE:
                payload[spec.name] = normalize_date(value)
            elif isinstance(value, str):
                payload[spec.name] = value.strip()
            else:
                payload[spec.name] = value
        return payload


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def normalize_date(value: Any) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip().split("T")[0]
