"""
Resources Configuration
Every table the admin panel manages, keyed by the name used in routes and
dashboard tabs. Adding a resource means declaring its schema and listing it here.
"""

from typing import Dict, List

from portfolio.modules.resources.schema import ResourceSchema
from portfolio.modules.profile.schemas import PROFILE_RESOURCE
from portfolio.modules.projects.schemas import PROJECT_RESOURCE
from portfolio.modules.certificates.schemas import CERTIFICATE_RESOURCE
from portfolio.modules.experiences.schemas import EXPERIENCE_RESOURCE

# Dashboard tab order
RESOURCES: Dict[str, ResourceSchema] = {
    schema.name: schema
    for schema in (PROFILE_RESOURCE, PROJECT_RESOURCE, CERTIFICATE_RESOURCE, EXPERIENCE_RESOURCE)
}

TAB_LABELS = {
    "profile": "Profile",
    "projects": "Projects",
    "certificates": "Certificates",
    "experiences": "Experience",
}


def get_resource_schema(name: str) -> ResourceSchema:
    """Get a resource schema by name"""
    if name not in RESOURCES:
        raise KeyError(f"Unknown resource: {name}")
    return RESOURCES[name]


def get_dashboard_tabs() -> List[Dict[str, str]]:
    """Tabs shown on the admin dashboard, one per resource"""
    return [
        {
            "id": name,
            "label": TAB_LABELS.get(name, schema.label),
            "endpoint": f"/api/v1/admin/{name}",
        }
        for name, schema in RESOURCES.items()
    ]
