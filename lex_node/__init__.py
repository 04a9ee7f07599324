"""Amazon Lex conversation bridge for ROS 2."""

from .adapter import LexAdapter, build_lex_adapter
from .config import (
    AwsClientConfiguration,
    LexConfiguration,
    MappingParameterReader,
    build_client_configuration,
    build_lex_configuration,
)
from .decoder import decode_post_content_result, decode_slots
from .errors import ErrorCode, LexNodeError
from .interactor import LexInteractor, build_lex_interactor
from .models import DialogState, MessageFormatType, TurnRequest, TurnResponse

__all__ = [
    "AwsClientConfiguration",
    "DialogState",
    "ErrorCode",
    "LexAdapter",
    "LexConfiguration",
    "LexInteractor",
    "LexNodeError",
    "MappingParameterReader",
    "MessageFormatType",
    "TurnRequest",
    "TurnResponse",
    "build_client_configuration",
    "build_lex_adapter",
    "build_lex_configuration",
    "build_lex_interactor",
    "decode_post_content_result",
    "decode_slots",
]


def __getattr__(name: str):
    if name == "LexNode":
        from .node import LexNode  # pragma: no cover - requires rclpy

        return LexNode
    raise AttributeError(name)

