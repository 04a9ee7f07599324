"""Behavioral tests for :mod:`lex_node.adapter`.

Given a parameter source and a fake Lex runtime,
When a conversation turn is handled,
Then the caller's response is either fully populated or left untouched.
"""

from __future__ import annotations

import io

import pytest
from botocore.response import StreamingBody

from conftest import FakeLexRuntime, parameter_reader
from lex_node.adapter import LexAdapter, build_lex_adapter
from lex_node.config import MappingParameterReader
from lex_node.errors import ErrorCode
from lex_node.models import TurnRequest, TurnResponse


@pytest.fixture
def request_() -> TurnRequest:
    return TurnRequest(
        content_type="text/plain; charset=utf-8",
        accept_type="text/plain; charset=utf-8",
        text_request="make a reservation",
    )


@pytest.fixture
def adapter(fake_client: FakeLexRuntime) -> LexAdapter:
    built = LexAdapter()
    assert build_lex_adapter(built, parameter_reader(), fake_client) is ErrorCode.SUCCESS
    return built


def test_build_with_empty_parameters_is_a_configuration_error() -> None:
    adapter = LexAdapter()

    error_code = build_lex_adapter(adapter, MappingParameterReader())

    assert error_code is ErrorCode.INVALID_LEX_CONFIGURATION
    assert adapter.interactor is None


def test_init_with_missing_interactor_is_an_invalid_argument() -> None:
    assert LexAdapter().init(None) is ErrorCode.INVALID_ARGUMENT


def test_successful_turn_populates_response(
    adapter: LexAdapter, request_: TurnRequest, fake_client: FakeLexRuntime
) -> None:
    response = TurnResponse()

    success = adapter.handle_turn(request_, response)

    assert success is True
    assert adapter.last_error is ErrorCode.SUCCESS
    assert response.text_response == "test_message"
    assert response.audio_response.startswith(b"blah blah blah")
    assert response.slots == [
        ("test_slots_key1", "test_slots_value1"),
        ("test_slots_key2", "test_slots_value2"),
    ]
    assert response.intent_name == "test_intent_name"
    assert response.message_format_type == "CustomPayload"
    assert response.dialog_state == "Failed"
    assert response.slot_to_elicit == "test_active_slot"
    assert fake_client.calls[0]["botName"] == "test_bot"
    assert fake_client.calls[0]["botAlias"] == "superbot"


def test_failed_turn_leaves_response_untouched(
    adapter: LexAdapter, request_: TurnRequest, failing_client: FakeLexRuntime
) -> None:
    response = TurnResponse()

    success = adapter.handle_turn(request_, response, client=failing_client)

    assert success is False
    assert adapter.last_error is ErrorCode.REMOTE_CALL_FAILED
    assert response.text_response == ""
    assert response.audio_response == b""
    assert response.slots == []
    assert response.intent_name == ""
    assert response.message_format_type == ""
    assert response.dialog_state == ""
    assert response.is_empty()


def test_failed_turn_does_not_clobber_previous_values(
    adapter: LexAdapter, request_: TurnRequest, failing_client: FakeLexRuntime
) -> None:
    response = TurnResponse(text_response="earlier", slots=[("k", "v")])

    assert adapter.handle_turn(request_, response, client=failing_client) is False

    assert response == TurnResponse(text_response="earlier", slots=[("k", "v")])


def test_client_override_does_not_change_configuration(
    adapter: LexAdapter, request_: TurnRequest, fake_client: FakeLexRuntime
) -> None:
    other = FakeLexRuntime()

    assert adapter.handle_turn(request_, TurnResponse(), client=other) is True

    assert fake_client.calls == []
    assert other.calls[0]["userId"] == "test_user"


def test_uninitialised_adapter_refuses_turns(request_: TurnRequest) -> None:
    adapter = LexAdapter()
    response = TurnResponse()

    assert adapter.handle_turn(request_, response) is False
    assert adapter.last_error is ErrorCode.INVALID_ARGUMENT
    assert response.is_empty()


def test_malformed_result_reports_invalid_result(adapter: LexAdapter, request_: TurnRequest) -> None:
    class _BadSlots(FakeLexRuntime):
        def post_content(self, **kwargs):  # noqa: ANN003, ANN201
            result = super().post_content(**kwargs)
            result["slots"] = "bm90IGpzb24="
            return result

    response = TurnResponse()

    assert adapter.handle_turn(request_, response, client=_BadSlots()) is False
    assert adapter.last_error is ErrorCode.INVALID_RESULT
    assert response.is_empty()


def test_truncated_audio_stream_reports_remote_call_failed(
    adapter: LexAdapter, request_: TurnRequest
) -> None:
    class _DroppedConnection(FakeLexRuntime):
        def post_content(self, **kwargs):  # noqa: ANN003, ANN201
            result = super().post_content(**kwargs)
            # Announces 100 bytes but the connection closes after 4.
            result["audioStream"] = StreamingBody(io.BytesIO(b"blah"), 100)
            return result

    response = TurnResponse()

    assert adapter.handle_turn(request_, response, client=_DroppedConnection()) is False
    assert adapter.last_error is ErrorCode.REMOTE_CALL_FAILED
    assert response.is_empty()


def test_session_is_usable_after_truncated_audio_stream(
    adapter: LexAdapter, request_: TurnRequest, fake_client: FakeLexRuntime
) -> None:
    class _DroppedConnection(FakeLexRuntime):
        def post_content(self, **kwargs):  # noqa: ANN003, ANN201
            result = super().post_content(**kwargs)
            result["audioStream"] = StreamingBody(io.BytesIO(b"blah"), 100)
            return result

    assert adapter.handle_turn(request_, TurnResponse(), client=_DroppedConnection()) is False

    response = TurnResponse()
    assert adapter.handle_turn(request_, response) is True
    assert response.text_response == "test_message"
