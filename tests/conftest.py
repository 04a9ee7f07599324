"""Shared fixtures for the Lex node tests."""

from __future__ import annotations

import base64
import io
import sys
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from botocore.exceptions import ClientError
from botocore.response import StreamingBody

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
if str(PACKAGE_ROOT) not in sys.path:
    sys.path.insert(0, str(PACKAGE_ROOT))

from lex_node.config import MappingParameterReader

SLOT_JSON = b'{"test_slots_key1": "test_slots_value1", "test_slots_key2": "test_slots_value2"}'


def make_success_result(audio: bytes = b"blah blah blah") -> Dict[str, Any]:
    """Return a ``post_content`` result shaped like boto3's ``lex-runtime`` output."""

    # The blob carries a trailing NUL the way some encoders emit it.
    slot_blob = base64.b64encode(SLOT_JSON + b"\x00").decode("ascii")
    return {
        "contentType": "test_content_type",
        "intentName": "test_intent_name",
        "slots": slot_blob,
        "sessionAttributes": "test_session_attributes",
        "message": "test_message",
        "messageFormat": "CustomPayload",
        "dialogState": "Failed",
        "slotToElicit": "test_active_slot",
        "audioStream": StreamingBody(io.BytesIO(audio), len(audio)),
    }


def make_client_error(code: str = "BadRequestException", message: str = "bot unavailable") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, "PostContent")


class FakeLexRuntime:
    """Stand-in for the boto3 ``lex-runtime`` client.

    Records every ``post_content`` call and either returns a canned result or
    raises a botocore ``ClientError``. When ``gate`` is set each call blocks
    until the gate is released, which lets tests hold a turn in flight.
    """

    def __init__(self, succeed: bool = True, *, gate: Optional[threading.Event] = None) -> None:
        self.succeed = succeed
        self.gate = gate
        self.calls: List[Dict[str, Any]] = []
        self.entered = threading.Event()
        self.active = 0
        self.max_active = 0
        self._counter_lock = threading.Lock()

    def post_content(self, **kwargs: Any) -> Dict[str, Any]:
        with self._counter_lock:
            self.calls.append(kwargs)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        self.entered.set()
        try:
            if self.gate is not None:
                self.gate.wait(timeout=5.0)
            if not self.succeed:
                raise make_client_error()
            return make_success_result()
        finally:
            with self._counter_lock:
                self.active -= 1


def parameter_reader(
    user_id: str = "test_user",
    bot_name: str = "test_bot",
    bot_alias: str = "superbot",
    *,
    separator: str = ".",
) -> MappingParameterReader:
    strings = {
        f"aws_client_configuration{separator}region": "us-west-2",
    }
    for key, value in (("user_id", user_id), ("bot_name", bot_name), ("bot_alias", bot_alias)):
        if value is not None:
            strings[f"lex_configuration{separator}{key}"] = value
    ints = {
        f"aws_client_configuration{separator}connect_timeout_ms": 9000,
        f"aws_client_configuration{separator}request_timeout_ms": 9000,
    }
    return MappingParameterReader(strings, ints)


@pytest.fixture
def reader() -> MappingParameterReader:
    return parameter_reader()


@pytest.fixture
def fake_client() -> FakeLexRuntime:
    return FakeLexRuntime(succeed=True)


@pytest.fixture
def failing_client() -> FakeLexRuntime:
    return FakeLexRuntime(succeed=False)
