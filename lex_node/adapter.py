"""Node-facing entry point that turns Lex failures into status values."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .config import ParameterReader
from .errors import ErrorCode, LexNodeError
from .interactor import LexInteractor, build_lex_interactor
from .models import TurnRequest, TurnResponse

__all__ = ["LexAdapter", "build_lex_adapter"]

_LOGGER = logging.getLogger(__name__)


class LexAdapter:
    """Serve conversation turns through an owned :class:`LexInteractor`.

    The adapter reports outcomes as :class:`~lex_node.errors.ErrorCode`
    values and booleans so ROS service callbacks never see exceptions. A
    failed turn leaves the caller's response record exactly as it was.
    """

    def __init__(self) -> None:
        self._interactor: Optional[LexInteractor] = None
        self.last_error: ErrorCode = ErrorCode.SUCCESS

    @property
    def interactor(self) -> Optional[LexInteractor]:
        return self._interactor

    def init(self, interactor: Optional[LexInteractor]) -> ErrorCode:
        """Take ownership of ``interactor``."""

        if interactor is None:
            _LOGGER.error("Cannot initialise Lex adapter without an interactor")
            return ErrorCode.INVALID_ARGUMENT
        self._interactor = interactor
        return ErrorCode.SUCCESS

    def handle_turn(
        self,
        request: TurnRequest,
        response: TurnResponse,
        client: Any = None,
    ) -> bool:
        """Run one turn and copy the decoded result into ``response``.

        ``client`` substitutes the Lex runtime client for this turn only.
        Returns ``True`` when ``response`` was populated.
        """

        if self._interactor is None:
            _LOGGER.warning("Lex adapter received a turn before initialisation")
            self.last_error = ErrorCode.INVALID_ARGUMENT
            return False
        try:
            decoded = self._interactor.post_content(request, client=client)
        except LexNodeError as exc:
            self.last_error = exc.error_code
            _LOGGER.warning("Lex turn failed (%s): %s", exc.error_code.name, exc)
            return False
        response.assign_from(decoded)
        self.last_error = ErrorCode.SUCCESS
        return True


def build_lex_adapter(
    adapter: LexAdapter,
    reader: ParameterReader,
    client: Any = None,
    *,
    separator: str = ".",
    lock_timeout: Optional[float] = None,
) -> ErrorCode:
    """Build an interactor from ``reader`` and hand it to ``adapter``.

    The error code of the first failing step is returned unchanged.
    """

    try:
        interactor = build_lex_interactor(
            reader,
            client,
            separator=separator,
            lock_timeout=lock_timeout,
        )
    except LexNodeError as exc:
        _LOGGER.error("Failed to build Lex interactor: %s", exc)
        return exc.error_code
    return adapter.init(interactor)
