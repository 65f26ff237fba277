"""
Form dialog for creating or editing one record of any resource type.

The dialog owns a draft (plain dict keyed by field name), validates it
locally before any network call, and submits through the resource
repository. Failures keep the dialog open with the draft intact; success
closes it, which lets the owning list view refetch.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from pydantic import BaseModel
import base64
import logging

from portfolio.core.errors import RemoteError, ValidationError
from portfolio.core.notifications import Notifier
from portfolio.modules.resources.repository import ResourceRepository
from portfolio.modules.resources.schema import TAGS, ITEMS, IMAGE, FieldSpec, is_blank

logger = logging.getLogger(__name__)

COMMIT_KEY = "Enter"
DEFAULT_MAX_IMAGE_BYTES = 5 * 1024 * 1024


class FormMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


class FormState(str, Enum):
    EDITING = "editing"
    SUBMITTING = "submitting"
    CLOSED = "closed"


class FormDialog:
    def __init__(
        self,
        repository: ResourceRepository,
        notifier: Notifier,
        existing: Optional[BaseModel] = None,
        on_close: Optional[Callable[["FormDialog"], None]] = None,
        max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
    ):
        self.repository = repository
        self.schema = repository.schema
        self.notifier = notifier
        self.on_close = on_close
        self.max_image_bytes = max_image_bytes
        self.existing = existing
        self.record_id: Optional[str] = getattr(existing, "id", None) if existing is not None else None
        self.mode = FormMode.EDIT if self.record_id else FormMode.CREATE
        self.draft: Dict[str, Any] = (
            self.schema.draft_from_record(existing) if self.mode == FormMode.EDIT else self.schema.empty_draft()
        )
        self.pending: Dict[str, str] = {spec.name: "" for spec in self.schema.fields if spec.is_list}
        self.image_file: Optional[str] = None  # data URI of a locally chosen file
        self.state = FormState.EDITING
        self.result: Optional[BaseModel] = None
        self.error: Optional[Exception] = None

    @property
    def is_busy(self) -> bool:
        return self.state == FormState.SUBMITTING

    @property
    def can_submit(self) -> bool:
        return self.state == FormState.EDITING

    def _field(self, name: str) -> FieldSpec:
        try:
            return self.schema.get_field(name)
        except KeyError:
            raise ValidationError([f"Unknown field '{name}' for {self.schema.label.lower()}"])

    # Scalar fields

    def set_field(self, name: str, value: Any) -> None:
        spec = self._field(name)
        if spec.is_list:
            self.draft[name] = []
            for item in value or []:
                self.add_item(name, item)
            return
        if spec.kind == IMAGE:
            self.set_image_url(value)
            return
        self.draft[name] = spec.empty_value() if value is None else value

    def update_fields(self, values: Dict[str, Any]) -> None:
        for name, value in values.items():
            self.set_field(name, value)

    # List fields

    def add_item(self, name: str, value: Any) -> bool:
        """Append a trimmed, non-empty value; technology tags also reject duplicates."""
        spec = self._field(name)
        if not spec.is_list:
            raise ValidationError([f"{spec.display_label} is not a list field"])
        item = str(value or "").strip()
        if not item:
            return False
        items: List[str] = self.draft.setdefault(name, [])
        if spec.kind == TAGS and item in items:
            return False
        items.append(item)
        return True

    def remove_item(self, name: str, value: Optional[str] = None, index: Optional[int] = None) -> None:
        spec = self._field(name)
        items: List[str] = self.draft.get(name, [])
        if spec.kind == TAGS:
            self.draft[name] = [item for item in items if item != value]
        elif spec.kind == ITEMS:
            if index is not None and 0 <= index < len(items):
                self.draft[name] = items[:index] + items[index + 1:]
        else:
            raise ValidationError([f"{spec.display_label} is not a list field"])

    def type_pending(self, name: str, text: str) -> None:
        self._field(name)
        self.pending[name] = text

    def commit_pending(self, name: str) -> bool:
        """Add button handler; the pending input is cleared only when the item was added."""
        added = self.add_item(name, self.pending.get(name, ""))
        if added:
            self.pending[name] = ""
        return added

    def handle_key(self, name: str, key: str) -> bool:
        if key == COMMIT_KEY:
            return self.commit_pending(name)
        return False

    # Image field

    def set_image_url(self, url: Optional[str]) -> None:
        spec = self.schema.image_field
        if spec is None:
            raise ValidationError([f"{self.schema.label} has no image"])
        self.draft[spec.name] = (url or "").strip()
        if self.draft[spec.name]:
            self.image_file = None

    def choose_file(self, filename: str, content_type: Optional[str], data: bytes) -> str:
        """Accept an image file as an inline data URI; rejected files leave the draft untouched."""
        spec = self.schema.image_field
        if spec is None:
            raise ValidationError([f"{self.schema.label} has no image"])
        problem = None
        if not content_type or not content_type.startswith("image/"):
            problem = "Please choose a valid image file"
        elif len(data) > self.max_image_bytes:
            problem = f"Image must be smaller than {self.max_image_bytes // (1024 * 1024)}MB"
        if problem:
            self.notifier.error(problem)
            logger.info(f"Rejected image upload {filename!r} ({content_type}, {len(data)} bytes)")
            raise ValidationError([problem])
        encoded = base64.b64encode(data).decode("ascii")
        self.image_file = f"data:{content_type};base64,{encoded}"
        self.draft[spec.name] = ""
        return self.image_file

    def clear_image(self) -> None:
        spec = self.schema.image_field
        if spec is not None:
            self.draft[spec.name] = ""
        self.image_file = None

    # Submission

    def effective_draft(self) -> Dict[str, Any]:
        draft = dict(self.draft)
        spec = self.schema.image_field
        if spec is not None and self.image_file:
            draft[spec.name] = self.image_file
        return draft

    def validate(self) -> Dict[str, Any]:
        draft = self.effective_draft()
        errors = self.schema.validate(draft)
        if errors:
            raise ValidationError(errors)
        return draft

    def submit(self) -> Optional[BaseModel]:
        """Create or update; returns the stored record, or None when the dialog stays open."""
        if not self.can_submit:
            logger.debug(f"Ignoring submit on {self.schema.name} dialog in state {self.state.value}")
            return None
        self.error = None
        try:
            draft = self.validate()
        except ValidationError as e:
            self.error = e
            for message in e.errors:
                self.notifier.error(message)
            return None

        payload = self.schema.to_payload(draft)
        label = self.schema.label
        self.state = FormState.SUBMITTING
        try:
            if self.mode == FormMode.EDIT:
                record = self.repository.update(self.record_id, payload)
            else:
                record = self.repository.create(payload)
        except RemoteError as e:
            self.state = FormState.EDITING
            self.error = e
            self.notifier.error(f"Error saving {label.lower()}")
            return None

        self.result = record
        verb = "updated" if self.mode == FormMode.EDIT else "created"
        self.notifier.success(f"{label} {verb} successfully")
        self.close()
        return record

    def cancel(self) -> None:
        self.close()

    def close(self) -> None:
        if self.state == FormState.CLOSED:
            return
        self.state = FormState.CLOSED
        if self.on_close is not None:
            self.on_close(self)
