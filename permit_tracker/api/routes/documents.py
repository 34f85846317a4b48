"""
Routes: checklist items. Edit, delete, and upload / download / remove files.
"""

from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status

from permit_tracker.api.auth import CurrentUser, get_current_user
from permit_tracker.api.container import get_documents
from permit_tracker.api.schemas.requests import DocumentUpdateRequest
from permit_tracker.api.schemas.responses import DocumentResponse
from permit_tracker.core.use_cases.manage_documents import DocumentChecklistManager

router = APIRouter()


@router.patch("/documents/{document_id}", response_model=DocumentResponse)
def update_document(
    document_id: int,
    body: DocumentUpdateRequest,
    documents: DocumentChecklistManager = Depends(get_documents),
):
    """Rename, flag as required/optional, add notes, or toggle completion."""
    document = documents.update_document(document_id, body.model_dump(exclude_unset=True))
    return DocumentResponse.model_validate(document)


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(document_id: int, documents: DocumentChecklistManager = Depends(get_documents)):
    documents.delete_document(document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/documents/{document_id}/upload", response_model=DocumentResponse)
async def upload_file(
    document_id: int,
    file: UploadFile = File(...),
    documents: DocumentChecklistManager = Depends(get_documents),
    user: CurrentUser = Depends(get_current_user),
):
    """
    Attach a file to a checklist item.

    The item is marked complete. Limits (size, extension) come from the
    runtime settings; a rejected or failed upload leaves nothing on disk.
    At most one byte past the size limit is read, enough to reject the file.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    policy = documents.upload_policy()
    data = await file.read(policy.max_file_size + 1)
    document = documents.upload_file(
        document_id,
        data,
        filename=file.filename,
        content_type=file.content_type,
        uploaded_by=user.id,
        policy=policy,
    )
    return DocumentResponse.model_validate(document)


@router.get("/documents/{document_id}/download")
def download_file(document_id: int, documents: DocumentChecklistManager = Depends(get_documents)):
    stored = documents.open_file(document_id)
    return Response(
        content=stored.content,
        media_type=stored.mime_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(stored.file_name)}",
        },
    )


@router.delete("/documents/{document_id}/file", response_model=DocumentResponse)
def delete_file(document_id: int, documents: DocumentChecklistManager = Depends(get_documents)):
    """Remove the attached file; the item reverts to incomplete."""
    return DocumentResponse.model_validate(documents.remove_file(document_id))
