"""Data models exchanged between the Lex node and its collaborators.

The classes here carry no ROS or boto3 types so they can be used from ROS 2
service callbacks as well as plain unit tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import List, Optional, Tuple

__all__ = [
    "DialogState",
    "MessageFormatType",
    "TurnRequest",
    "TurnResponse",
]

UNKNOWN_LABEL = "Unknown"


class _WireEnum(str, Enum):
    """Closed set of Lex wire values with an ``UNKNOWN`` fallback member."""

    @classmethod
    def from_wire(cls, value: object) -> Optional["_WireEnum"]:
        """Return the member for ``value``.

        ``None`` and empty strings yield ``None`` (the field was absent), an
        unrecognised value yields ``UNKNOWN``.
        """

        if value is None:
            return None
        if isinstance(value, cls):
            return value
        text = str(getattr(value, "value", value)).strip()
        if not text:
            return None
        try:
            return cls(text)
        except ValueError:
            return cls["UNKNOWN"]

    @classmethod
    def label_for(cls, value: object) -> str:
        member = cls.from_wire(value)
        return "" if member is None else member.label

    @property
    def label(self) -> str:
        return self.value


class MessageFormatType(_WireEnum):
    """Format of the message Lex returns with a turn."""

    PLAIN_TEXT = "PlainText"
    CUSTOM_PAYLOAD = "CustomPayload"
    SSML = "SSML"
    COMPOSITE = "Composite"
    UNKNOWN = UNKNOWN_LABEL


class DialogState(_WireEnum):
    """State of the Lex conversation after a turn."""

    ELICIT_INTENT = "ElicitIntent"
    CONFIRM_INTENT = "ConfirmIntent"
    ELICIT_SLOT = "ElicitSlot"
    FULFILLED = "Fulfilled"
    READY_FOR_FULFILLMENT = "ReadyForFulfillment"
    FAILED = "Failed"
    UNKNOWN = UNKNOWN_LABEL


@dataclass
class TurnRequest:
    """One utterance destined for the Lex bot.

    ``audio_request`` wins when it is non-empty, otherwise ``text_request``
    is sent as UTF-8. Blank content types fall back to the configured ones.

    Examples
    --------
    >>> TurnRequest(text_request="make a reservation").payload()
    b'make a reservation'
    """

    content_type: str = ""
    accept_type: str = ""
    text_request: str = ""
    audio_request: bytes = b""

    def payload(self) -> bytes:
        if self.audio_request:
            return bytes(self.audio_request)
        return (self.text_request or "").encode("utf-8")


@dataclass
class TurnResponse:
    """Flat view of a Lex PostContent result.

    Every field defaults to empty. A failed turn never touches a caller's
    instance, so ``TurnResponse()`` compares equal to an untouched one.
    """

    content_type: str = ""
    text_response: str = ""
    audio_response: bytes = b""
    slots: List[Tuple[str, str]] = field(default_factory=list)
    intent_name: str = ""
    session_attributes: str = ""
    message_format_type: str = ""
    dialog_state: str = ""
    slot_to_elicit: str = ""

    def assign_from(self, other: "TurnResponse") -> None:
        """Overwrite every field with the values held by ``other``."""

        for item in fields(self):
            value = getattr(other, item.name)
            if isinstance(value, list):
                value = list(value)
            setattr(self, item.name, value)

    def is_empty(self) -> bool:
        return self == TurnResponse()
