"""Streaming response bound to a relay session and its cancellation token."""

from __future__ import annotations

import anyio
import structlog
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from iptvrelay.domain.exceptions import UpstreamStreamError
from iptvrelay.domain.ports.relay import CancellationTokenPort, RelaySessionPort

log = structlog.get_logger(__name__)


class RelayResponse(Response):
    """Send upstream status, headers and body chunks to the client.

    A disconnect listener runs next to the body pump.  When the client
    leaves it cancels the token and aborts the pump, which interrupts a
    pending upstream read; the session is then closed exactly once.

    An upstream failure after the headers were sent cannot be reported in
    the body, so :class:`UpstreamStreamError` is re-raised and the server
    drops the connection.
    """

    def __init__(
        self,
        session: RelaySessionPort,
        cancel_token: CancellationTokenPort,
    ) -> None:
        self.session = session
        self.cancel_token = cancel_token
        self.status_code = session.status_code
        self.background = None
        self.init_headers(session.headers)

    async def _listen_for_disconnect(
        self, receive: Receive, cancel_scope: anyio.CancelScope
    ) -> None:
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                break
        self.cancel_token.cancel()
        cancel_scope.cancel()

    async def _pump(self, send: Send) -> None:
        body = self.session.body()
        try:
            await send(
                {
                    "type": "http.response.start",
                    "status": self.status_code,
                    "headers": self.raw_headers,
                }
            )
            async for chunk in body:
                await send({"type": "http.response.body", "body": chunk, "more_body": True})
            await send({"type": "http.response.body", "body": b"", "more_body": False})
        except OSError:
            # Client socket went away between chunks.
            self.cancel_token.cancel()
        finally:
            with anyio.CancelScope(shield=True):
                await body.aclose()
                await self.session.aclose()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        failure: UpstreamStreamError | None = None
        async with anyio.create_task_group() as tg:
            tg.start_soon(self._listen_for_disconnect, receive, tg.cancel_scope)
            try:
                await self._pump(send)
            except UpstreamStreamError as exc:
                failure = exc
            finally:
                tg.cancel_scope.cancel()

        if failure is not None:
            log.warning("relay_aborted_mid_stream", status_code=self.status_code)
            raise failure
