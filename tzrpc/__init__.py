"""Client for the network RPCs of a Tezos node."""

from tzrpc.core.network import NetworkRPC
from tzrpc.exceptions import (
    NetworkRPCError,
    StatusError,
    DecodeError,
    PeerRemovalError,
    LogStreamTimeout,
)

__all__ = [
    "NetworkRPC",
    "NetworkRPCError",
    "StatusError",
    "DecodeError",
    "PeerRemovalError",
    "LogStreamTimeout",
]
