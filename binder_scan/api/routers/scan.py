"""
Binder scan API endpoints.

Routes:
- POST /scan - Scan a base64-encoded photo
- POST /scan/upload - Scan a photo uploaded as multipart form data

Dependencies: binder_scan.application.services.scan_service, image_parser
System role: Binder scan HTTP API
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile

from binder_scan.api.deps import get_scan_service, get_settings_dependency
from binder_scan.api.routers.router_utils import handle_scan_errors
from binder_scan.application.image_parser import parse_image_bytes, parse_image_payload
from binder_scan.application.services.scan_service import ScanService
from binder_scan.configs import Settings
from binder_scan.core.exceptions import InvalidImageError
from binder_scan.models.common import ErrorResponse
from binder_scan.models.scan import ScanRequest, ScanResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scan", tags=["scan"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or invalid image, or unknown prompt variant"},
    413: {"model": ErrorResponse, "description": "Image exceeds the size limit"},
    500: {"model": ErrorResponse, "description": "Vision API key not configured or internal error"},
    502: {"model": ErrorResponse, "description": "Vision model failed"},
}


@router.post(
    "",
    response_model=ScanResponse,
    response_model_by_alias=True,
    responses=ERROR_RESPONSES,
)
@handle_scan_errors
async def scan_image(
    request: ScanRequest,
    scan_service: ScanService = Depends(get_scan_service),
    settings: Settings = Depends(get_settings_dependency),
) -> ScanResponse:
    """
    Identify the cards in a binder page photo.

    Request body:
    - imageBase64: Base64 payload or data URL (required)
    - mimeType: Image type, sniffed from the bytes when omitted
    - promptVariant: binder (default) or single
    - enrich: Look cards up in the catalogs (default true)
    - includePrices: Attach market prices (server default when omitted)

    Args:
        request: Scan request body
        scan_service: Injected scan service
        settings: Application settings

    Returns:
        ScanResponse: Detected cards with catalog matches

    Raises:
        InvalidImageError(400/413): Missing, malformed or oversized image
        UnsupportedPromptVariantError(400): Unknown prompt variant
        ConfigurationError(500): Vision API key not configured
        VisionModelError(502): Vision model call failed
    """
    logger.info(f"{__name__}:scan_image - START")
    image = parse_image_payload(
        request.image_base64,
        mime_type=request.mime_type,
        max_bytes=settings.server.max_image_bytes,
    )
    return await scan_service.scan(
        image,
        prompt_variant=request.prompt_variant,
        enrich=request.enrich,
        include_prices=request.include_prices,
    )


@router.post(
    "/upload",
    response_model=ScanResponse,
    response_model_by_alias=True,
    responses=ERROR_RESPONSES,
)
@handle_scan_errors
async def scan_upload(
    image: UploadFile | None = File(default=None),
    prompt_variant: str | None = Form(default=None, alias="promptVariant"),
    enrich: bool = Form(default=True),
    include_prices: bool | None = Form(default=None, alias="includePrices"),
    scan_service: ScanService = Depends(get_scan_service),
    settings: Settings = Depends(get_settings_dependency),
) -> ScanResponse:
    """
    Identify the cards in an uploaded photo.

    Same behavior and errors as POST /scan, with the image sent as the
    multipart file field "image".
    """
    if image is None:
        raise InvalidImageError("Missing image", field="image")

    logger.info(
        f"{__name__}:scan_upload - START filename={image.filename} "
        f"content_type={image.content_type}"
    )
    data = await image.read()
    parsed = parse_image_bytes(
        data,
        mime_type=image.content_type,
        max_bytes=settings.server.max_image_bytes,
    )
    return await scan_service.scan(
        parsed,
        prompt_variant=prompt_variant,
        enrich=enrich,
        include_prices=include_prices,
    )
