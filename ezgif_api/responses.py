"""
Payload builders for /api/status and /api/convert.

Convert payloads are canned: output links and metrics are synthesized from
the current time and fixed values, no input is read or processed.
"""

import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict

from .config import SERVICE_NAME, OUTPUT_BASE_URL, ConvertAction
from .models import ConvertRequest, is_present
from .utils.http_client import RequestResult

DEFAULT_RESIZE_SIZE = "800x600"


def iso_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2024-05-01T12:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_status_payload(result: RequestResult, website: str) -> Dict[str, Any]:
    """Map the upstream check result to the /api/status body.

    responseSize counts code points of the decoded text, not UTF-16 units.
    """
    if not result.success:
        return {
            "service": SERVICE_NAME,
            "website": website,
            "reachable": False,
            "error": result.error,
            "timestamp": iso_timestamp(),
        }

    return {
        "service": SERVICE_NAME,
        "website": website,
        "reachable": True,
        "statusCode": result.status,
        "timestamp": iso_timestamp(),
        "responseSize": len(result.data or ""),
    }


def _output_url(extension: str) -> str:
    return f"{OUTPUT_BASE_URL}/{int(time.time() * 1000)}.{extension}"


def _gif_to_mp4(request: ConvertRequest) -> Dict[str, Any]:
    return {
        "output": _output_url("mp4"),
        "duration": "5.2s",
        "size": "2.4 MB",
    }


def _video_to_gif(request: ConvertRequest) -> Dict[str, Any]:
    return {
        "output": _output_url("gif"),
        "duration": "3.8s",
        "size": "1.8 MB",
    }


def _resize(request: ConvertRequest) -> Dict[str, Any]:
    size = request.options.get("size")
    return {
        "output": _output_url("png"),
        "originalSize": "1920x1080",
        "newSize": size if is_present(size) else DEFAULT_RESIZE_SIZE,
    }


def _optimize(request: ConvertRequest) -> Dict[str, Any]:
    return {
        "output": _output_url("gif"),
        "originalSize": "4.2 MB",
        "optimizedSize": "1.1 MB",
        "reduction": "73%",
    }


CANNED_RESPONSE_BUILDERS: Dict[ConvertAction, Callable[[ConvertRequest], Dict[str, Any]]] = {
    ConvertAction.GIF_TO_MP4: _gif_to_mp4,
    ConvertAction.VIDEO_TO_GIF: _video_to_gif,
    ConvertAction.RESIZE: _resize,
    ConvertAction.OPTIMIZE: _optimize,
}


def build_convert_response(action: ConvertAction, request: ConvertRequest) -> Dict[str, Any]:
    """
    Build the /api/convert body for a validated request.

    Actions with a canned builder report a completed conversion. Every other
    action only gets an acknowledgment with status "processing"; there is no
    job id and nothing to poll later.
    """
    builder = CANNED_RESPONSE_BUILDERS.get(action)
    if builder is None:
        return {
            "success": True,
            "action": action.value,
            "message": "Conversion request received",
            "timestamp": iso_timestamp(),
            "status": "processing",
        }

    payload = {
        "success": True,
        "action": action.value,
        "input": request.input_reference,
    }
    payload.update(builder(request))
    payload["status"] = "completed"
    return payload
