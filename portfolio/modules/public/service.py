from supabase import Client
from datetime import date
from typing import Any, Dict, List, Optional
import logging

from portfolio.core.errors import RemoteError
from portfolio.modules.resources.repository import ResourceRepository
from portfolio.modules.profile.schemas import PROFILE_RESOURCE, DEFAULT_PROFILE
from portfolio.modules.projects.schemas import PROJECT_RESOURCE, PROJECT_CATEGORIES
from portfolio.modules.certificates.schemas import CERTIFICATE_RESOURCE
from portfolio.modules.experiences.schemas import EXPERIENCE_RESOURCE

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"
PRESENT_LABEL = "Present"


def format_month(value: date) -> str:
    return value.strftime("%b %Y")


def format_period(start: date, end: Optional[date]) -> str:
    """Human period for an experience; an open end means the position is current."""
    return f"{format_month(start)} - {format_month(end) if end else PRESENT_LABEL}"


class PublicSiteService:
    """Read-only sections of the public page. A failing section never breaks the page."""

    def __init__(self, supabase: Client):
        self.profiles = ResourceRepository(supabase, PROFILE_RESOURCE)
        self.projects = ResourceRepository(supabase, PROJECT_RESOURCE)
        self.certificates = ResourceRepository(supabase, CERTIFICATE_RESOURCE)
        self.experiences = ResourceRepository(supabase, EXPERIENCE_RESOURCE)

    def get_profile(self) -> Dict[str, Any]:
        try:
            profile = self.profiles.first()
        except RemoteError as e:
            logger.error(f"Error fetching profile: {e}")
            profile = None
        if profile is None:
            return {**DEFAULT_PROFILE, "is_default": True}
        return {**profile.model_dump(mode="json"), "is_default": False}

    def get_projects(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        try:
            projects = self.projects.list()
        except RemoteError as e:
            logger.error(f"Error fetching projects: {e}")
            return []
        if category and category != ALL_CATEGORIES:
            projects = [p for p in projects if p.category == category]
        return [
            {**p.model_dump(mode="json"), "category_label": PROJECT_CATEGORIES.get(p.category, p.category)}
            for p in projects
        ]

    def get_certificates(self) -> List[Dict[str, Any]]:
        try:
            certificates = self.certificates.list()
        except RemoteError as e:
            logger.error(f"Error fetching certificates: {e}")
            return []
        return [c.model_dump(mode="json") for c in certificates]

    def get_experiences(self) -> List[Dict[str, Any]]:
        try:
            experiences = self.experiences.list()
        except RemoteError as e:
            logger.error(f"Error fetching experiences: {e}")
            return []
        return [
            {
                **e.model_dump(mode="json"),
                "is_current": e.end_date is None,
                "period": format_period(e.start_date, e.end_date),
            }
            for e in experiences
        ]

    def get_categories(self) -> List[Dict[str, str]]:
        return [{"id": ALL_CATEGORIES, "label": "All"}] + [
            {"id": key, "label": label} for key, label in PROJECT_CATEGORIES.items()
        ]

    def get_sections(self) -> Dict[str, Any]:
        return {
            "profile": self.get_profile(),
            "projects": self.get_projects(),
            "project_categories": self.get_categories(),
            "certificates": self.get_certificates(),
            "experiences": self.get_experiences(),
        }
