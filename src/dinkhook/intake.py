from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Optional, Tuple

from pydantic import ValidationError
from starlette.datastructures import UploadFile
from starlette.requests import Request

from dinkhook.schemas.envelope import Envelope, WireModel
from dinkhook.schemas.extras import parse_extra
from dinkhook.utils.logger_util import get_logger

logger = get_logger(__name__)

PAYLOAD_FIELD = "payload_json"
FILE_FIELD = "file"


class IntakeError(Exception):
    """Malformed or missing input. Reported to the sender as a 4xx, never retried here."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class Attachment:
    filename: Optional[str]
    content_type: Optional[str]
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class Submission:
    raw_json: str
    envelope: Envelope
    extra: Optional[WireModel]
    attachment: Optional[Attachment] = None

    @property
    def fingerprint(self) -> str:
        h = hashlib.sha256(self.raw_json.encode("utf-8"))
        if self.attachment is not None:
            h.update(b"\x00")
            h.update(self.attachment.data)
        return h.hexdigest()


def _format_errors(exc: ValidationError, prefix: str) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{prefix}{loc}: {err.get('msg')}")
    return "; ".join(parts)


def decode_payload(raw_json: str) -> Tuple[Envelope, Optional[WireModel]]:
    """Decode the ``payload_json`` text into an Envelope and its typed extra.

    Raises IntakeError if the text is not a JSON object or does not match the
    envelope / extra schema. Unknown type tags are accepted with extra None.
    """
    try:
        data = json.loads(raw_json)
    except json.JSONDecodeError as exc:
        raise IntakeError(f"{PAYLOAD_FIELD} is not valid JSON: {exc.msg} (line {exc.lineno} column {exc.colno})") from exc
    if not isinstance(data, dict):
        raise IntakeError(f"{PAYLOAD_FIELD} must be a JSON object, got {type(data).__name__}")
    try:
        envelope = Envelope.model_validate(data)
    except ValidationError as exc:
        raise IntakeError(f"invalid envelope: {_format_errors(exc, '')}") from exc
    try:
        extra = parse_extra(envelope.type, envelope.extra)
    except ValidationError as exc:
        raise IntakeError(f"invalid {envelope.type} extra: {_format_errors(exc, 'extra.')}") from exc
    return envelope, extra


async def _read_text_field(value) -> str:
    if isinstance(value, UploadFile):
        raw = await value.read()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise IntakeError(f"{PAYLOAD_FIELD} is not valid UTF-8") from exc
    return value


async def _read_attachment(value, max_bytes: int) -> Optional[Attachment]:
    if value is None:
        return None
    if not isinstance(value, UploadFile):
        # a plain text part named "file" carries no image; pass its bytes along unchanged
        data = value.encode("utf-8")
        filename, content_type = None, "text/plain"
    else:
        data = await value.read(max_bytes + 1)
        filename, content_type = value.filename, value.content_type
    if len(data) > max_bytes:
        raise IntakeError(f"{FILE_FIELD} exceeds {max_bytes} bytes", status_code=413)
    return Attachment(filename=filename, content_type=content_type, data=data)


async def parse_submission(request: Request, max_attachment_bytes: int) -> Submission:
    """Read a multipart webhook request into a Submission.

    Only ``multipart/form-data`` bodies are accepted. ``payload_json`` is
    required; ``file`` is optional and its bytes are kept as received.
    """
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("multipart/form-data"):
        raise IntakeError(f"expected multipart/form-data, got {content_type or 'no content type'}")

    try:
        form = await request.form()
    except Exception as exc:
        # starlette raises its own 400 HTTPException / MultiPartException here
        raise IntakeError(f"malformed multipart body: {getattr(exc, 'detail', None) or exc}") from exc

    try:
        value = form.get(PAYLOAD_FIELD)
        if value is None:
            raise IntakeError(f"missing {PAYLOAD_FIELD} form field")
        raw_json = await _read_text_field(value)
        envelope, extra = decode_payload(raw_json)
        attachment = await _read_attachment(form.get(FILE_FIELD), max_attachment_bytes)
    finally:
        await form.close()

    logger.debug(
        "decoded %s from %s (attachment=%s bytes)",
        envelope.type,
        envelope.player,
        attachment.size if attachment else 0,
    )
    return Submission(raw_json=raw_json, envelope=envelope, extra=extra, attachment=attachment)
