"""
Router for the /api endpoints.

/api/status checks the upstream website; /api/convert validates the request
against the action vocabulary and returns a canned or acknowledgment payload.
"""

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from .config import CONVERT_EXAMPLE, VALID_ACTIONS, ConvertAction
from .models import ConvertRequest
from .responses import build_convert_response, build_status_payload
from .utils.error_handling import ErrorCode, create_error_response
from .utils.http_client import fetch_with_timeout
from .utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["ezgif"])


async def read_request_payload(request: Request) -> Any:
    """Decode a JSON or urlencoded body; an empty body is an empty object.

    Malformed JSON raises and is left to the application error handler.
    """
    content_type = request.headers.get("content-type", "")
    if "application/x-www-form-urlencoded" in content_type or "multipart/form-data" in content_type:
        form = await request.form()
        return dict(form)

    body = await request.body()
    if not body.strip():
        return {}
    return await request.json()


@router.get("/status")
async def get_status(request: Request):
    """Report whether the upstream website is reachable."""
    settings = request.app.state.settings
    website = settings.target_website

    try:
        result = await fetch_with_timeout(
            website,
            client=request.app.state.client,
            timeout=settings.http_timeout,
        )
        if result.success:
            logger.info(f"{website} reachable, status {result.status}")
        else:
            logger.warning(f"{website} unreachable: {result.error}")
        return build_status_payload(result, website)
    except Exception as e:
        logger.exception("Error in get_status")
        return create_error_response(ErrorCode.INTERNAL_ERROR, message=str(e))


@router.post("/convert")
async def convert(request: Request):
    """Validate a conversion request and answer it.

    Checks run in order and the first failure is returned: action present,
    action known, url or file present.
    """
    payload = await read_request_payload(request)

    try:
        convert_request = ConvertRequest.from_payload(payload)

        if not convert_request.has_action:
            return create_error_response(ErrorCode.MISSING_ACTION, example=CONVERT_EXAMPLE)

        if convert_request.action not in VALID_ACTIONS:
            return create_error_response(ErrorCode.INVALID_ACTION, validActions=VALID_ACTIONS)

        if not convert_request.has_source:
            return create_error_response(ErrorCode.MISSING_SOURCE)

        action = ConvertAction(convert_request.action)
        logger.info(f"Conversion request: action={action.value} input={convert_request.input_reference}")
        return JSONResponse(content=build_convert_response(action, convert_request))

    except Exception as e:
        logger.exception("Error in convert")
        return create_error_response(ErrorCode.CONVERSION_FAILED, message=str(e))
