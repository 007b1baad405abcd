"""Client for the /network RPCs of a node."""

import asyncio
import contextlib
import logging
from collections.abc import Mapping
from typing import Any, AsyncIterator, Callable, Iterable, List, Optional, Tuple, Union

import httpx
from pydantic import TypeAdapter, ValidationError

from tzrpc.config import settings
from tzrpc.core.log_stream import ObjectMemberDecoder
from tzrpc.exceptions import DecodeError, LogStreamTimeout, PeerRemovalError, StatusError
from tzrpc.models import ConnectionInfo, GossipPeer, GossipPeerDetail

logger = logging.getLogger(__name__)

_connections_adapter = TypeAdapter(List[ConnectionInfo])
_peers_adapter = TypeAdapter(List[List[GossipPeer]])

PeerRemovals = Union[Mapping[str, bool], Iterable[Tuple[str, bool]]]


class NetworkRPC:
    """Calls the network endpoints of a node and decodes their answers.

    Use it as an async context manager, or call :meth:`start` and
    :meth:`stop`. An ``httpx.AsyncClient`` passed in is used as is and left
    open on :meth:`stop`.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.url = (url or settings.rpc_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._client: Optional[httpx.AsyncClient] = client
        self._owns_client = client is None

    async def start(self):
        """Open the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        logger.info(f"Network RPC client started ({self.url})")

    async def stop(self):
        """Close the HTTP client if this instance opened it."""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None
        logger.info("Network RPC client stopped")

    async def __aenter__(self) -> "NetworkRPC":
        await self.start()
        return self

    async def __aexit__(self, *exc_info):
        await self.stop()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("NetworkRPC is not started")
        return self._client

    async def _get(self, path: str) -> httpx.Response:
        url = f"{self.url}{path}"
        logger.debug(f"GET {url}")
        return await self.client.get(url)

    @staticmethod
    def _check_ok(response: httpx.Response):
        status = f"{response.status_code} {response.reason_phrase}"
        if status != "200 OK":
            raise StatusError(status)

    # Connections

    async def list_connections(self) -> List[ConnectionInfo]:
        """GET /network/connections"""
        response = await self._get("/network/connections")
        try:
            return _connections_adapter.validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(f"invalid connection list: {e}") from e

    async def get_connection(self, peer_id: str) -> ConnectionInfo:
        """GET /network/connections/<peer_id>

        ``peer_id`` is put in the path as is.
        """
        response = await self._get(f"/network/connections/{peer_id}")
        try:
            return ConnectionInfo.model_validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(f"invalid connection {peer_id}: {e}") from e

    async def remove_peer(self, peer_id: str, wait: bool = False):
        """DELETE /network/connections/<peer_id>

        With ``wait`` the node only answers once the connection is closed.
        """
        url = f"{self.url}/network/connections/{peer_id}"
        if wait:
            url = f"{url}?wait"
        logger.debug(f"DELETE {url}")
        response = await self.client.delete(url)
        self._check_ok(response)
        logger.info(f"Removed peer {peer_id}")

    async def remove_peers(self, peers: PeerRemovals) -> List[str]:
        """Remove peers one after the other, stopping at the first failure.

        ``peers`` maps peer ids to their ``wait`` flag, or is a sequence of
        ``(peer_id, wait)`` pairs. Returns the removed peer ids in order. On
        failure, :class:`PeerRemovalError` carries the peers removed so far.
        """
        if isinstance(peers, Mapping):
            peers = peers.items()

        removed: List[str] = []
        for peer_id, wait in peers:
            try:
                await self.remove_peer(peer_id, wait)
            except Exception as e:
                logger.error(f"Removing peer {peer_id} failed after {len(removed)} removals: {e}")
                raise PeerRemovalError(peer_id, removed, e) from e
            removed.append(peer_id)
        return removed

    # Greylist

    async def clear_greylist(self):
        """GET /network/greylist/clear"""
        response = await self._get("/network/greylist/clear")
        self._check_ok(response)
        logger.info("Greylist cleared")

    # Log

    async def iter_network_log(self, max_duration: Optional[float] = None) -> AsyncIterator[Any]:
        """Follow GET /network/log, yielding each entry as it arrives.

        The node never ends this stream by itself. ``max_duration`` seconds
        after the request is sent, :class:`LogStreamTimeout` is raised, even if
        the node has not answered yet.
        """
        if max_duration is None:
            max_duration = settings.log_duration
        url = f"{self.url}/network/log"
        logger.debug(f"GET {url} (following for {max_duration}s)")

        loop = asyncio.get_running_loop()
        decoder = ObjectMemberDecoder()
        deadline = loop.time() + max_duration
        async with contextlib.AsyncExitStack() as stack:
            request = self.client.stream("GET", url, timeout=httpx.Timeout(self.timeout, read=None))
            try:
                response = await asyncio.wait_for(stack.enter_async_context(request), timeout=max_duration)
            except asyncio.TimeoutError:
                raise LogStreamTimeout(max_duration) from None

            chunks = response.aiter_text()
            while not decoder.finished:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise LogStreamTimeout(max_duration)
                try:
                    chunk = await asyncio.wait_for(anext(chunks, None), timeout=remaining)
                except asyncio.TimeoutError:
                    raise LogStreamTimeout(max_duration) from None
                if chunk is None:
                    for entry in decoder.close():
                        yield entry
                    return
                for entry in decoder.feed(chunk):
                    yield entry

    async def stream_network_log(
        self,
        max_duration: Optional[float] = None,
        sink: Callable[[Any], None] = print
    ):
        """Follow GET /network/log, passing each entry to ``sink``."""
        count = 0
        try:
            async with contextlib.aclosing(self.iter_network_log(max_duration)) as entries:
                async for entry in entries:
                    sink(entry)
                    count += 1
        finally:
            logger.debug(f"Network log: {count} entries received")

    # Peers

    async def list_peers(self) -> List[List[GossipPeer]]:
        """GET /network/peers

        Numbers must be sent as JSON numbers here.
        """
        response = await self._get("/network/peers")
        try:
            return _peers_adapter.validate_json(response.content, strict=True)
        except ValidationError as e:
            raise DecodeError(f"invalid peer list: {e}") from e

    async def get_peer(self, peer_id: str) -> GossipPeerDetail:
        """GET /network/peers/<peer_id>

        This endpoint sends some numbers as strings; both forms are accepted.
        """
        response = await self._get(f"/network/peers/{peer_id}")
        try:
            peer = GossipPeerDetail.model_validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(f"invalid peer {peer_id}: {e}") from e
        return peer.model_copy(update={"public_key_hash": peer_id})
