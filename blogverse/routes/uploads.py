"""
Upload Routes

GET /get-upload-url hands the editor a presigned S3 URL. The client PUTs
the image there and then uses the object URL as a banner or inline image.
"""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from blogverse.dependencies import get_upload_broker
from blogverse.limiter import limiter
from blogverse.services.uploads import UploadBroker


router = APIRouter(tags=["uploads"])


class UploadUrlResponse(BaseModel):
    upload_url: str


@router.get("/get-upload-url", response_model=UploadUrlResponse)
@limiter.limit("30/minute")
async def get_upload_url(request: Request, broker: UploadBroker = Depends(get_upload_broker)):
    return UploadUrlResponse(upload_url=await broker.request_upload_url())
