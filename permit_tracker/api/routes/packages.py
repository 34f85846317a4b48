"""
Routes: permit packages (CRUD, status options, checklist items, stats).
"""

from fastapi import APIRouter, Depends, Response, status

from permit_tracker.api.auth import CurrentUser, get_current_user
from permit_tracker.api.container import get_documents, get_packages
from permit_tracker.api.schemas.requests import (
    DocumentCreateRequest,
    PackageCreateRequest,
    PackageUpdateRequest,
)
from permit_tracker.api.schemas.responses import (
    DocumentResponse,
    PackageListResponse,
    PackageResponse,
    PackageStatsResponse,
    StatusOptionResponse,
    StatusOverviewResponse,
)
from permit_tracker.core.use_cases.manage_documents import DocumentChecklistManager
from permit_tracker.core.use_cases.manage_packages import PackageLifecycleManager

router = APIRouter()


@router.get("/packages", response_model=PackageListResponse)
def list_packages(
    status: str | None = None,
    permit_type: str | None = None,
    search: str | None = None,
    packages: PackageLifecycleManager = Depends(get_packages),
):
    """List packages with progress. `all` disables a filter; stats cover every package."""
    listing = packages.list_packages(status=status, permit_type=permit_type, search=search)
    return PackageListResponse(
        packages=[PackageResponse.from_view(v) for v in listing.packages],
        stats=PackageStatsResponse.model_validate(listing.stats),
    )


@router.get("/stats", response_model=PackageStatsResponse)
def get_stats(packages: PackageLifecycleManager = Depends(get_packages)):
    return PackageStatsResponse.model_validate(packages.stats())


@router.post("/packages", response_model=PackageResponse, status_code=status.HTTP_201_CREATED)
def create_package(
    body: PackageCreateRequest,
    packages: PackageLifecycleManager = Depends(get_packages),
    user: CurrentUser = Depends(get_current_user),
):
    """Create a package; its permit type's checklist is added automatically."""
    view = packages.create(body.model_dump(exclude_unset=True), created_by=user.id)
    return PackageResponse.from_view(view)


@router.get("/packages/{package_id}", response_model=PackageResponse)
def get_package(package_id: int, packages: PackageLifecycleManager = Depends(get_packages)):
    return PackageResponse.from_view(packages.get(package_id))


@router.patch("/packages/{package_id}", response_model=PackageResponse)
def update_package(
    package_id: int,
    body: PackageUpdateRequest,
    packages: PackageLifecycleManager = Depends(get_packages),
):
    """
    Partial update. A status change is checked against the status machine
    and answered with 409 when illegal.
    """
    view = packages.update(package_id, body.model_dump(exclude_unset=True))
    return PackageResponse.from_view(view)


@router.delete("/packages/{package_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_package(package_id: int, packages: PackageLifecycleManager = Depends(get_packages)):
    packages.delete(package_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/packages/{package_id}/status-options", response_model=StatusOverviewResponse)
def get_status_options(package_id: int, packages: PackageLifecycleManager = Depends(get_packages)):
    overview = packages.status_overview(package_id)
    return StatusOverviewResponse(
        current=overview.current.value,
        suggested=overview.suggested.value if overview.suggested else None,
        options=[
            StatusOptionResponse(
                status=o.status.value,
                label=o.label,
                allowed=o.allowed,
                reason=o.reason,
            )
            for o in overview.options
        ],
    )


# ── Checklist items of a package ──

@router.get("/packages/{package_id}/documents", response_model=list[DocumentResponse])
def list_documents(package_id: int, documents: DocumentChecklistManager = Depends(get_documents)):
    return [DocumentResponse.model_validate(d) for d in documents.list_documents(package_id)]


@router.post(
    "/packages/{package_id}/documents",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_document(
    package_id: int,
    body: DocumentCreateRequest,
    documents: DocumentChecklistManager = Depends(get_documents),
):
    document = documents.add_document(
        package_id,
        document_name=body.document_name,
        is_required=body.is_required,
        notes=body.notes,
    )
    return DocumentResponse.model_validate(document)
