"""
Application context: everything the routes need, created once per app and
handed to request handlers through `get_context`. Replaces any module-level
ambient lookup of the Supabase client or session.
"""

from supabase import Client
from typing import Callable, Dict, Optional
import logging

from portfolio.config.settings import Settings
from portfolio.config.resources_config import RESOURCES
from portfolio.core.notifications import Notifier
from portfolio.database.supabase_client import SupabaseClient
from portfolio.modules.resources.controller import ResourceCrudController
from portfolio.modules.resources.list_view import ConfirmCallback, decline
from portfolio.modules.resources.schema import ResourceSchema
from portfolio.modules.public.gesture import RevealTracker

logger = logging.getLogger(__name__)

SessionClientFactory = Callable[[str], Client]


class AppContext:
    def __init__(
        self,
        settings: Settings,
        supabase: Optional[Client] = None,
        session_client_factory: Optional[SessionClientFactory] = None,
    ):
        settings.validate_backend()
        self.settings = settings
        self._supabase = supabase
        self._session_client_factory = session_client_factory or (
            lambda token: SupabaseClient.for_session(token, self.settings)
        )
        self.resources: Dict[str, ResourceSchema] = RESOURCES
        self.reveal_tracker = RevealTracker(
            clicks_required=settings.reveal_clicks,
            window_seconds=settings.reveal_window_seconds,
        )
        self.has_backend_session = False

    @property
    def supabase(self) -> Client:
        if self._supabase is None:
            self._supabase = SupabaseClient.get_client(self.settings)
        return self._supabase

    def start(self) -> None:
        """Check whether the Supabase client already carries a session (e.g. restored from storage)."""
        try:
            session = self.supabase.auth.get_session()
            self.has_backend_session = session is not None
        except Exception as e:
            logger.warning(f"Could not check existing Supabase session: {e}")
            self.has_backend_session = False
        logger.info(f"Backend session present: {self.has_backend_session}")

    def close(self) -> None:
        """Sign out and drop the cached client."""
        if self._supabase is not None and self.has_backend_session:
            try:
                self._supabase.auth.sign_out()
            except Exception as e:
                logger.warning(f"Supabase sign out on shutdown failed: {e}")
        self.has_backend_session = False
        self._supabase = None
        SupabaseClient.reset_client()

    def session_client(self, access_token: str) -> Client:
        """Client for one admin request; row level security sees that admin's token."""
        return self._session_client_factory(access_token)

    def controller(
        self,
        resource: str,
        notifier: Notifier,
        access_token: str,
        confirm: ConfirmCallback = decline,
    ) -> ResourceCrudController:
        return ResourceCrudController(
            self.session_client(access_token),
            self.resources[resource],
            notifier,
            confirm=confirm,
            max_image_bytes=self.settings.max_image_bytes,
        )
