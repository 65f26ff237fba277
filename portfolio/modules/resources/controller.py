from supabase import Client
from pydantic import BaseModel
from typing import Optional
import logging

from portfolio.core.errors import RemoteError
from portfolio.core.notifications import Notifier
from portfolio.modules.resources.form_dialog import FormDialog, DEFAULT_MAX_IMAGE_BYTES
from portfolio.modules.resources.list_view import ListView, ConfirmCallback, decline
from portfolio.modules.resources.repository import ResourceRepository
from portfolio.modules.resources.schema import ResourceSchema

logger = logging.getLogger(__name__)


class ResourceCrudController:
    """Admin workflow for one resource schema: a repository, its list view and form dialogs."""

    def __init__(
        self,
        supabase: Client,
        schema: ResourceSchema,
        notifier: Notifier,
        confirm: ConfirmCallback = decline,
        max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
    ):
        self.schema = schema
        self.notifier = notifier
        self.repository = ResourceRepository(supabase, schema)
        self.list_view = ListView(
            self.repository, notifier, confirm=confirm, max_image_bytes=max_image_bytes
        )
        self.singleton: Optional[BaseModel] = None

    def load(self) -> ListView:
        self.list_view.mount()
        return self.list_view

    def open_create(self) -> FormDialog:
        return self.list_view.open_create()

    def open_edit(self, record_id: str) -> FormDialog:
        """Edit the record as displayed in the list, loading it directly if the list lacks it."""
        record = self.list_view.find(record_id)
        if record is None:
            record = self.repository.get(record_id)
        return self.list_view.open_edit(record)

    def delete(self, record_id: str) -> bool:
        return self.list_view.delete(record_id)

    # Singleton resources (profile)

    def load_singleton(self) -> Optional[BaseModel]:
        """The first stored row, or None when there is none or it cannot be fetched."""
        try:
            self.singleton = self.repository.first()
        except RemoteError as e:
            logger.error(f"Error fetching {self.schema.table}: {e}")
            self.singleton = None
        return self.singleton

    def open_singleton(self) -> FormDialog:
        """Edit the stored row, or start from the built-in defaults when none exists."""
        record = self.load_singleton()
        dialog = FormDialog(
            self.repository,
            self.notifier,
            existing=record,
            on_close=lambda _dialog: self.load_singleton(),
            max_image_bytes=self.list_view.max_image_bytes,
        )
        return dialog
