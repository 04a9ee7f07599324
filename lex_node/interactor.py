"""Single-flight access to a Lex conversation session."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .config import (
    AwsClientConfiguration,
    LexConfiguration,
    ParameterReader,
    build_client_configuration,
    build_lex_configuration,
)
from .decoder import decode_post_content_result
from .errors import InvalidArgument, InvalidLexConfiguration, RemoteCallFailed, SessionBusy
from .models import TurnRequest, TurnResponse

__all__ = [
    "LexInteractor",
    "build_lex_interactor",
    "build_post_content_request",
    "create_lex_runtime_client",
]

_LOGGER = logging.getLogger(__name__)


def create_lex_runtime_client(configuration: AwsClientConfiguration) -> Any:
    """Return a boto3 ``lex-runtime`` client honouring the configured timeouts."""

    session = boto3.Session(region_name=configuration.region)
    client_config = Config(
        connect_timeout=configuration.connect_timeout,
        read_timeout=configuration.request_timeout,
        retries={"max_attempts": 0},
    )
    return session.client("lex-runtime", config=client_config)


def build_post_content_request(
    configuration: LexConfiguration, request: TurnRequest
) -> Dict[str, Any]:
    """Translate ``request`` into keyword arguments for ``post_content``."""

    return {
        "botName": configuration.bot_name,
        "botAlias": configuration.bot_alias,
        "userId": configuration.user_id,
        "contentType": (request.content_type or "").strip() or configuration.content_type,
        "accept": (request.accept_type or "").strip() or configuration.accept_type,
        "inputStream": request.payload(),
    }


class LexInteractor:
    """Own the Lex conversation for one user/bot/alias triple.

    Lex keeps the dialog state server side, so only one turn may be in
    flight at a time. :meth:`post_content` holds a lock for the whole
    exchange. By default (``lock_timeout`` of ``None`` or ``0``) a second
    caller waits for the running turn; with a positive ``lock_timeout`` it gives up after that many seconds and raises
    :class:`~lex_node.errors.SessionBusy` without reaching the service.
    """

    def __init__(
        self,
        configuration: Optional[LexConfiguration],
        client: Any,
        *,
        lock_timeout: Optional[float] = None,
    ) -> None:
        if configuration is None:
            raise InvalidLexConfiguration("Lex configuration must be provided")
        missing = configuration.missing_fields()
        if missing:
            raise InvalidLexConfiguration(f"Lex configuration is missing {', '.join(missing)}")
        if client is None:
            raise InvalidArgument("Lex runtime client must be provided")
        if lock_timeout is not None and lock_timeout < 0:
            raise InvalidArgument("lock_timeout must be non-negative")
        self._configuration = configuration
        self._client = client
        self._lock_timeout = lock_timeout
        self._lock = threading.Lock()

    @property
    def configuration(self) -> LexConfiguration:
        return self._configuration

    def _acquire(self) -> bool:
        if not self._lock_timeout:
            return self._lock.acquire()
        return self._lock.acquire(timeout=self._lock_timeout)

    def post_content(self, request: TurnRequest, *, client: Any = None) -> TurnResponse:
        """Send one turn to Lex and return the decoded response.

        ``client`` replaces the configured runtime client for this call only.

        Raises
        ------
        InvalidArgument
            If ``request`` is missing.
        SessionBusy
            If another turn holds the session past ``lock_timeout``.
        RemoteCallFailed
            If the transport or the Lex service reports an error.
        InvalidResult
            If the result breaks the PostContent wire contract.
        """

        if request is None:
            raise InvalidArgument("turn request must be provided")
        runtime = client if client is not None else self._client

        if not self._acquire():
            raise SessionBusy(
                f"conversation with bot '{self._configuration.bot_name}' already has a turn in flight"
            )
        try:
            kwargs = build_post_content_request(self._configuration, request)
            _LOGGER.debug(
                "Posting content to Lex (bot=%s, alias=%s, content_type=%s, accept=%s)",
                kwargs["botName"],
                kwargs["botAlias"],
                kwargs["contentType"],
                kwargs["accept"],
            )
            try:
                result = runtime.post_content(**kwargs)
                # The audio body streams from the socket, so decoding can still fail in transit.
                return decode_post_content_result(result)
            except ClientError as exc:
                error = exc.response.get("Error", {})
                raise RemoteCallFailed(
                    f"{error.get('Code', 'Unknown')}: {error.get('Message', exc)}"
                ) from exc
            except BotoCoreError as exc:
                raise RemoteCallFailed(str(exc)) from exc
        finally:
            self._lock.release()


def build_lex_interactor(
    reader: ParameterReader,
    client: Any = None,
    *,
    separator: str = ".",
    lock_timeout: Optional[float] = None,
) -> LexInteractor:
    """Build an interactor from parameters.

    A boto3 ``lex-runtime`` client is created from the
    ``aws_client_configuration`` parameters unless ``client`` is given.
    """

    configuration = build_lex_configuration(reader, separator=separator)
    if client is None:
        client_configuration = build_client_configuration(reader, separator=separator)
        try:
            client = create_lex_runtime_client(client_configuration)
        except BotoCoreError as exc:
            raise InvalidLexConfiguration(f"unable to create Lex runtime client: {exc}") from exc
    return LexInteractor(configuration, client, lock_timeout=lock_timeout)
