"""ROS 2 node exposing Amazon Lex conversation turns as a service."""

from __future__ import annotations

from typing import Any, Optional

import rclpy
from rclpy.executors import MultiThreadedExecutor
from rclpy.node import Node

from lex_common_msgs.msg import KeyValue
from lex_common_msgs.srv import AudioTextConversation

from .adapter import LexAdapter, build_lex_adapter
from .config import NodeParameterReader
from .errors import ErrorCode
from .models import TurnRequest, TurnResponse


def to_turn_request(msg: Any) -> TurnRequest:
    """Convert an ``AudioTextConversation`` request into a :class:`TurnRequest`."""

    audio = getattr(msg, "audio_request", None)
    audio_data = getattr(audio, "data", None) if audio is not None else None
    return TurnRequest(
        content_type=str(getattr(msg, "content_type", "") or ""),
        accept_type=str(getattr(msg, "accept_type", "") or ""),
        text_request=str(getattr(msg, "text_request", "") or ""),
        audio_request=bytes(audio_data or b""),
    )


def fill_ros_response(turn: TurnResponse, msg: Any) -> Any:
    """Copy ``turn`` into an ``AudioTextConversation`` response message."""

    msg.text_response = turn.text_response
    msg.audio_response.data = list(turn.audio_response)
    msg.slots = [KeyValue(key=key, value=value) for key, value in turn.slots]
    msg.intent_name = turn.intent_name
    msg.message_format_type = turn.message_format_type
    msg.dialog_state = turn.dialog_state
    # Older interface revisions lack these fields.
    for name in ("session_attributes", "slot_to_elicit"):
        if hasattr(msg, name):
            setattr(msg, name, getattr(turn, name))
    return msg


class LexNode(Node):
    """Serve ``AudioTextConversation`` requests against an Amazon Lex bot.

    The bot identity comes from the ``lex_configuration.*`` parameters and the
    boto3 client settings from ``aws_client_configuration.*``. Turns are
    serialised by the underlying interactor. ``lock_timeout_s`` of ``0`` (the
    default) makes a concurrent request wait; a positive value makes it fail
    with ``SESSION_BUSY`` after that many seconds.
    """

    def __init__(self, adapter: Optional[LexAdapter] = None, client: Any = None) -> None:
        super().__init__("lex_node")
        self._adapter = adapter or self._build_adapter(client)
        service_name = str(self.declare_parameter("service_name", "lex_conversation").value).strip()
        service_name = service_name or "lex_conversation"
        self._service = self.create_service(
            AudioTextConversation,
            service_name,
            self._handle_conversation,
        )
        self.get_logger().info(f"Lex node ready (service={service_name})")

    # ------------------------------------------------------------------ helpers
    def _build_adapter(self, client: Any) -> LexAdapter:
        lock_timeout = float(self.declare_parameter("lock_timeout_s", 0.0).value)
        adapter = LexAdapter()
        error_code = build_lex_adapter(
            adapter,
            NodeParameterReader(self),
            client,
            lock_timeout=lock_timeout if lock_timeout > 0 else None,
        )
        if error_code != ErrorCode.SUCCESS:
            self.get_logger().error(f"Failed to build Lex adapter: {error_code.name}")
            raise RuntimeError(f"Lex node initialisation failed: {error_code.name}")
        return adapter

    # ---------------------------------------------------------------- callbacks
    def _handle_conversation(self, request: Any, response: Any) -> Any:
        turn = TurnResponse()
        if self._adapter.handle_turn(to_turn_request(request), turn):
            fill_ros_response(turn, response)
            self.get_logger().debug(
                f"Lex turn complete (intent={turn.intent_name}, dialog_state={turn.dialog_state})"
            )
        else:
            self.get_logger().warning(
                f"Lex turn failed ({self._adapter.last_error.name}); returning empty response"
            )
        return response


def main(args: Optional[list[str]] = None) -> None:
    rclpy.init(args=args)
    node = LexNode()
    executor = MultiThreadedExecutor()
    executor.add_node(node)
    try:
        executor.spin()
    except KeyboardInterrupt:
        node.get_logger().info("Lex node interrupted; shutting down")
    finally:
        executor.remove_node(node)
        node.destroy_node()
        rclpy.shutdown()


if __name__ == "__main__":  # pragma: no cover - entrypoint behaviour
    main()
