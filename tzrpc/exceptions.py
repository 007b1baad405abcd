"""Errors raised by the network RPC client.

Transport failures are not wrapped: whatever httpx raises reaches the caller
unchanged.
"""

from typing import List


class NetworkRPCError(Exception):
    """Base class for errors raised by :class:`tzrpc.NetworkRPC`."""


class StatusError(NetworkRPCError):
    """A call that returns nothing got a status other than ``200 OK``."""

    def __init__(self, status: str):
        super().__init__(f"expected status '200 OK' got {status}")
        self.status = status


class DecodeError(NetworkRPCError):
    """The body was not JSON or did not have the expected shape."""


class PeerRemovalError(NetworkRPCError):
    """Removing several peers stopped at the first failure.

    ``removed`` lists the peers that were removed before ``peer_id`` failed.
    The failure itself is chained as ``__cause__``.
    """

    def __init__(self, peer_id: str, removed: List[str], reason: Exception):
        super().__init__(f"failed to remove peer {peer_id}: {reason}")
        self.peer_id = peer_id
        self.removed = removed


class LogStreamTimeout(NetworkRPCError):
    """The network log was followed for its whole allotted duration."""

    def __init__(self, duration: float):
        super().__init__(f"network log closed after {duration}s")
        self.duration = duration
