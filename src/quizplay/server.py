"""Asyncio TCP front end: one command loop, one console and one round per connection."""

from __future__ import annotations

import asyncio
import logging

from .data.catalog import CatalogStore
from .features.commands.loop import CommandLoop
from .features.play.channels import StreamChannel, StreamFile
from .features.play.host import SessionHost, new_client_id
from .ui.presenters import RichPresenter, make_console

__all__ = ["QuizServer"]

logger = logging.getLogger(__name__)


class QuizServer:
    def __init__(
        self,
        catalog: CatalogStore,
        host: SessionHost,
        *,
        bind: str = "127.0.0.1",
        port: int = 3030,
        no_color: bool = False,
    ) -> None:
        self.catalog = catalog
        self.host = host
        self.bind = bind
        self.port = port
        self.no_color = no_color
        self._server: asyncio.Server | None = None
        self._clients: set[asyncio.Task[None]] = set()

    @property
    def bound_port(self) -> int:
        if self._server is None or not self._server.sockets:
            raise RuntimeError("server is not listening")
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> None:
        self._server = await asyncio.start_server(self._handle, self.bind, self.port)
        logger.info("listening on %s:%d", self.bind, self.bound_port, extra={"bind": self.bind, "port": self.bound_port})

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        assert self._server is not None
        async with self._server:
            await self._server.serve_forever()

    async def close(self) -> None:
        if self._server is not None:
            self._server.close()
        for task in list(self._clients):
            task.cancel()
        if self._clients:
            await asyncio.gather(*self._clients, return_exceptions=True)
        if self._server is not None:
            await self._server.wait_closed()

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        task = asyncio.current_task()
        if task is not None:
            self._clients.add(task)
        client_id = new_client_id()
        peer = writer.get_extra_info("peername")
        logger.info("client %s connected from %s", client_id, peer, extra={"client_id": client_id, "peer": str(peer)})
        console = make_console(no_color=self.no_color, file=StreamFile(writer), width=80)
        channel = StreamChannel(reader, writer, console)
        loop = CommandLoop(
            client_id=client_id,
            catalog=self.catalog,
            host=self.host,
            channel=channel,
            presenter=RichPresenter(console),
            flush=channel.flush,
        )
        try:
            await loop.run()
        finally:
            # A round still open here was abandoned mid-question.
            self.host.release(client_id)
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError:
                pass
            if task is not None:
                self._clients.discard(task)
            logger.info("client %s disconnected", client_id, extra={"client_id": client_id})
