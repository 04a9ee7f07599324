"""Decode Lex ``PostContent`` results into :class:`~lex_node.models.TurnResponse`.

Lex returns the slot map as base64 encoded UTF-8 JSON, the audio reply as a
streaming body and the dialog state and message format as enum names. When
botocore has already decoded a JSON header the mapping is accepted as is.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, List, Mapping, Tuple

from .errors import InvalidResult
from .models import DialogState, MessageFormatType, TurnResponse

__all__ = ["decode_post_content_result", "decode_slots"]

_LOGGER = logging.getLogger(__name__)


def _slot_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _flatten(slots: Mapping[str, Any]) -> List[Tuple[str, str]]:
    return [(str(key), _slot_value(value)) for key, value in slots.items()]


def decode_slots(blob: Any) -> List[Tuple[str, str]]:
    """Return the slot pairs in the key order of the decoded JSON object.

    >>> decode_slots("eyJrMSI6ICJ2MSJ9")
    [('k1', 'v1')]
    >>> decode_slots(None)
    []
    """

    if blob is None:
        return []
    if isinstance(blob, Mapping):
        return _flatten(blob)
    if isinstance(blob, str):
        try:
            blob = blob.strip().encode("ascii")
        except UnicodeEncodeError as exc:
            raise InvalidResult("slot blob is not base64 text") from exc
    if not blob:
        return []
    try:
        raw = base64.b64decode(bytes(blob), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidResult(f"slot blob is not valid base64: {exc}") from exc
    # Some encoders include a trailing NUL terminator in the blob.
    try:
        text = raw.rstrip(b"\x00").decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidResult(f"slot blob is not UTF-8: {exc}") from exc
    if not text.strip():
        return []
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidResult(f"slot blob is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise InvalidResult("slot blob must decode to a JSON object")
    return _flatten(payload)


def _read_audio(stream: Any) -> bytes:
    if stream is None:
        return b""
    if isinstance(stream, (bytes, bytearray, memoryview)):
        return bytes(stream)
    read = getattr(stream, "read", None)
    if not callable(read):
        raise InvalidResult(f"unsupported audio stream type {type(stream).__name__}")
    try:
        return bytes(read())
    finally:
        close = getattr(stream, "close", None)
        if callable(close):
            close()


def _session_attributes(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def decode_post_content_result(result: Mapping[str, Any]) -> TurnResponse:
    """Build a fresh :class:`TurnResponse` from a ``post_content`` result."""

    response = TurnResponse(
        content_type=str(result.get("contentType") or ""),
        text_response=str(result.get("message") or ""),
        audio_response=_read_audio(result.get("audioStream")),
        slots=decode_slots(result.get("slots")),
        intent_name=str(result.get("intentName") or ""),
        session_attributes=_session_attributes(result.get("sessionAttributes")),
        message_format_type=MessageFormatType.label_for(result.get("messageFormat")),
        dialog_state=DialogState.label_for(result.get("dialogState")),
        slot_to_elicit=str(result.get("slotToElicit") or ""),
    )
    _LOGGER.debug(
        "Decoded Lex result (intent=%s, dialog_state=%s, slots=%d, audio=%d bytes)",
        response.intent_name,
        response.dialog_state,
        len(response.slots),
        len(response.audio_response),
    )
    return response
