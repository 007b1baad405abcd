from .common import Metadata, Point, PeerEvent
from .connection import Version, ConnectionInfo
from .peer import PeerStat, GossipPeer, GossipPeerDetail

__all__ = [
    "Metadata",
    "Point",
    "PeerEvent",
    "Version",
    "ConnectionInfo",
    "PeerStat",
    "GossipPeer",
    "GossipPeerDetail",
]
