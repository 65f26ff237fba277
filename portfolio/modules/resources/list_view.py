from enum import Enum
from typing import Callable, List, Optional
from pydantic import BaseModel
import logging

from portfolio.core.errors import RemoteError
from portfolio.core.notifications import Notifier
from portfolio.modules.resources.form_dialog import FormDialog, DEFAULT_MAX_IMAGE_BYTES
from portfolio.modules.resources.repository import ResourceRepository

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]


class ListState(str, Enum):
    LOADING = "loading"
    LOADED = "loaded"
    DEGRADED = "degraded"  # last fetch failed; previously loaded records are kept


def decline(prompt: str) -> bool:
    return False


class ListView:
    """All records of one resource type, with create/edit/delete entry points."""

    def __init__(
        self,
        repository: ResourceRepository,
        notifier: Notifier,
        confirm: ConfirmCallback = decline,
        max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
    ):
        self.repository = repository
        self.schema = repository.schema
        self.notifier = notifier
        self.confirm = confirm
        self.max_image_bytes = max_image_bytes
        self.state = ListState.LOADING
        self.records: List[BaseModel] = []
        self.dialog: Optional[FormDialog] = None
        self.error: Optional[RemoteError] = None
        self.fetch_count = 0

    def mount(self) -> List[BaseModel]:
        return self.refresh()

    def refresh(self) -> List[BaseModel]:
        """Full refetch; the newest result always replaces what is displayed."""
        self.state = ListState.LOADING
        self.fetch_count += 1
        try:
            records = self.repository.list()
        except RemoteError as e:
            logger.error(f"Error fetching {self.schema.table}: {e}")
            self.state = ListState.DEGRADED
            self.error = e
            return self.records
        self.records = records
        self.error = None
        self.state = ListState.LOADED
        return self.records

    def find(self, record_id: str) -> Optional[BaseModel]:
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def delete(self, record_id: str) -> bool:
        """Confirmed delete; the record leaves the displayed list only after the remote succeeds."""
        self.error = None
        prompt = f"Are you sure you want to delete this {self.schema.label.lower()}?"
        if not self.confirm(prompt):
            logger.debug(f"Delete of {self.schema.table} {record_id} not confirmed")
            return False
        try:
            self.repository.delete(record_id)
        except RemoteError as e:
            logger.error(f"Error deleting {self.schema.table} {record_id}: {e}")
            self.notifier.error(f"Error deleting {self.schema.label.lower()}")
            self.error = e
            return False
        self.records = [record for record in self.records if record.id != record_id]
        self.notifier.success(f"{self.schema.label} deleted successfully")
        return True

    def _open(self, existing: Optional[BaseModel]) -> FormDialog:
        self.dialog = FormDialog(
            self.repository,
            self.notifier,
            existing=existing,
            on_close=self._on_dialog_closed,
            max_image_bytes=self.max_image_bytes,
        )
        return self.dialog

    def open_create(self) -> FormDialog:
        return self._open(None)

    def open_edit(self, record: BaseModel) -> FormDialog:
        return self._open(record)

    def _on_dialog_closed(self, dialog: FormDialog) -> None:
        if self.dialog is dialog:
            self.dialog = None
        self.refresh()
