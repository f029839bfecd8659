"""
Paste routes.
Handles the usage page, paste submission and raw paste retrieval.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse
from starlette.datastructures import UploadFile
from starlette.types import Message, Receive, Scope

from rbin.config import (
    DEFAULT_HOST,
    DEFAULT_ID_LENGTH,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_BODY_SIZE,
    DEFAULT_PASTE_DIR,
    DEFAULT_PORT,
    DEFAULT_REQUEST_LOG_LEVEL,
    DEFAULT_WRITE_ATTEMPTS,
    Settings,
)
from rbin.models import Outcome
from rbin.service import PasteService

router = APIRouter()
logger = logging.getLogger(__name__)

FORM_FIELD = "rbin"

USAGE_TEXT = f"""rbin - Simple Command-Line Pastebin
===================================

Usage:
------
Pipe text using curl (or similar tools) with the form field name '{FORM_FIELD}':

  echo "Your text here" | curl -F '{FORM_FIELD}=<-' http://<host>:<port>/

Or paste from a file:

  cat your_file.txt | curl -F '{FORM_FIELD}=<-' http://<host>:<port>/

rbin will respond with a URL like http://<host>:<port>/<id>

Configuration (Environment Variables):
--------------------------------------
RBIN_HOST               : Listen IP address (Default: {DEFAULT_HOST})
RBIN_PORT               : Listen port (Default: {DEFAULT_PORT})
RBIN_PASTE_DIR          : Directory for storing pastes (Default: "{DEFAULT_PASTE_DIR}")
RBIN_ID_LENGTH          : Length of generated paste ids (Default: {DEFAULT_ID_LENGTH})
RBIN_MAX_BODY_SIZE      : Maximum request body in bytes (Default: {DEFAULT_MAX_BODY_SIZE})
RBIN_WRITE_ATTEMPTS     : Fresh ids tried when an id is already taken (Default: {DEFAULT_WRITE_ATTEMPTS})
RBIN_LOG_LEVEL          : Application log level (Default: {DEFAULT_LOG_LEVEL})
RBIN_REQUEST_LOG_LEVEL  : Level at which HTTP requests are logged (Default: {DEFAULT_REQUEST_LOG_LEVEL})

Place these in a .env file or set them in your environment.
"""

_ERRORS = {
    Outcome.INVALID_ID: (400, "Invalid paste ID format."),
    Outcome.NOT_FOUND: (404, "Paste not found."),
    Outcome.IO_FAILURE: (500, "Storage error."),
    Outcome.ALREADY_EXISTS: (500, "Storage error."),
    Outcome.EMPTY_CONTENT: (400, "Paste content cannot be empty"),
    Outcome.MISSING_FIELD: (400, f"Missing '{FORM_FIELD}' form field"),
    Outcome.TOO_LARGE: (413, "Paste exceeds the maximum size"),
}


def get_service(request: Request) -> PasteService:
    """Paste service built by the application factory."""
    return request.app.state.pastes


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _raise_for(outcome: Outcome) -> None:
    status_code, detail = _ERRORS[outcome]
    raise HTTPException(status_code=status_code, detail=detail)


def _base_url(request: Request) -> str:
    scheme = request.headers.get("x-forwarded-proto", "http")
    host = request.headers.get("host", "localhost")
    return f"{scheme}://{host}"


class BodyTooLarge(Exception):
    """Raised while reading a request body that exceeds the size limit."""


def _limited_receive(receive: Receive, limit: int) -> Receive:
    """Wrap an ASGI receive callable so it fails once more than limit bytes arrive."""
    received = 0

    async def wrapped() -> Message:
        nonlocal received
        message = await receive()
        if message["type"] == "http.request":
            received += len(message.get("body", b""))
            if received > limit:
                raise BodyTooLarge(f"request body exceeds {limit} bytes")
        return message

    return wrapped


def _latin1_form_scope(scope: Scope, content_type: str) -> Scope:
    """
    Copy scope with the multipart charset forced to latin-1.

    Plain form fields are then decoded byte for byte, so encoding them back
    to latin-1 yields exactly the bytes the client sent.
    """
    params = [
        part
        for part in content_type.split(";")
        if not part.strip().lower().startswith("charset=")
    ]
    forced = ";".join(params + [" charset=latin-1"]).encode("latin-1")
    headers = [
        (name, value) for name, value in scope["headers"] if name != b"content-type"
    ]
    headers.append((b"content-type", forced))
    return {**scope, "headers": headers}


@router.get("/", response_class=PlainTextResponse)
async def usage() -> str:
    """Serve the plain-text usage page."""
    logger.debug("Serving root plain text info.")
    return USAGE_TEXT


@router.post("/", response_class=PlainTextResponse)
async def create_paste(
    request: Request,
    service: PasteService = Depends(get_service),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Create a paste from the 'rbin' form field.

    The field may be a plain form value or a file upload; other fields are
    ignored.

    Returns:
        Shareable URL of the new paste

    Raises:
        HTTPException: 400 for a missing or empty field, 413 for an oversized
            body, 500 if the paste could not be stored
    """
    logger.debug("Received paste submission request.")
    declared_length = request.headers.get("content-length")
    if (
        declared_length
        and declared_length.isdigit()
        and int(declared_length) > settings.max_body_size
    ):
        logger.warning(f"Rejected submission of {declared_length} bytes")
        _raise_for(Outcome.TOO_LARGE)

    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("multipart/form-data"):
        logger.warning(f"Rejected submission with content type {content_type!r}")
        _raise_for(Outcome.MISSING_FIELD)

    limited = Request(
        _latin1_form_scope(request.scope, content_type),
        _limited_receive(request.receive, settings.max_body_size),
    )
    try:
        async with limited.form(max_part_size=settings.max_body_size) as form:
            fields = form.getlist(FORM_FIELD)
            field = fields[0] if fields else None
            if field is None:
                content = None
            elif isinstance(field, UploadFile):
                content = await field.read()
            else:
                content = field.encode("latin-1")
    except BodyTooLarge:
        logger.warning(f"Rejected submission over {settings.max_body_size} bytes")
        _raise_for(Outcome.TOO_LARGE)

    result = await service.create_paste(content)
    if not result.ok:
        _raise_for(result.outcome)

    url = f"{_base_url(request)}/{result.paste_id}"
    logger.info(f"Paste created successfully: {url}")
    return url


# The path converter lets ids containing "/" reach validation and get a 400.
@router.get("/{paste_id:path}", response_class=PlainTextResponse)
async def read_paste(
    paste_id: str,
    service: PasteService = Depends(get_service),
) -> PlainTextResponse:
    """
    Return a paste's raw content as text/plain.

    Raises:
        HTTPException: 400 for a malformed id, 404 if no such paste,
            500 on any other storage error
    """
    logger.debug(f"Received request to retrieve paste ID: {paste_id}")
    result = await service.get_paste(paste_id)
    if not result.ok:
        _raise_for(result.outcome)
    return PlainTextResponse(result.content)
