"""Media upload routes."""

from fastapi import APIRouter, Request

from ..auth import CurrentCaller
from ..memories import request_upload_target
from ..rate_limit import limiter, upload_rate_limit
from ..storage import BlobStorage, UploadTarget

router = APIRouter(prefix="/media", tags=["media"])


@router.post("/upload-url", response_model=UploadTarget)
@limiter.limit(upload_rate_limit)
async def create_upload_url(request: Request, caller_id: CurrentCaller, blobs: BlobStorage):
    """
    Get a signed upload target.

    Upload the file directly to ``url``, then pass ``key`` as
    ``image_storage_id`` / ``video_storage_id`` when saving the memory.
    """
    return await request_upload_target(blobs, caller_id)
