"""
Default checklists instantiated when a package is created.

Only "Building Permit" ships a template; any other permit type starts with an
empty checklist.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class DocumentTemplate:
    document_name: str
    is_required: bool = True


BUILDING_PERMIT_TEMPLATE = (
    DocumentTemplate("Building Plans"),
    DocumentTemplate("Site Plan"),
    DocumentTemplate("Structural Calculations"),
    DocumentTemplate("Energy Compliance Forms"),
    DocumentTemplate("Permit Application Form"),
    DocumentTemplate("Property Survey"),
    DocumentTemplate("Soil Report", is_required=False),
    DocumentTemplate("Environmental Impact Assessment", is_required=False),
    DocumentTemplate("Traffic Impact Study", is_required=False),
    DocumentTemplate("Fire Department Approval"),
    DocumentTemplate("Utility Clearances"),
    DocumentTemplate("HOA Approval", is_required=False),
)

CHECKLIST_TEMPLATES: dict[str, tuple[DocumentTemplate, ...]] = {
    "Building Permit": BUILDING_PERMIT_TEMPLATE,
}


def get_template(permit_type: str) -> tuple[DocumentTemplate, ...]:
    """Template for an exact permit type match; empty when none is defined."""
    return CHECKLIST_TEMPLATES.get(permit_type, ())
