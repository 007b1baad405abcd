from typing import Optional, List
from pydantic import BaseModel, Field

from .common import Metadata, Point, PeerEvent


class PeerStat(BaseModel):
    """Traffic counters for a gossip peer."""
    total_sent: int = 0
    total_recv: int = 0
    current_inflow: int = 0
    current_outflow: int = 0


class GossipPeer(BaseModel):
    """Entry of GET /network/peers.

    The node does not repeat the public key hash inside the record, so
    ``public_key_hash`` is only set when the caller knows it.
    """
    public_key_hash: Optional[str] = None
    score: int = 0
    trusted: bool = False
    conn_metadata: Optional[Metadata] = None
    state: str
    reachable_at: Optional[Point] = None
    stat: PeerStat = Field(default_factory=PeerStat)

    # Only present once the event happened
    last_failed_connection: Optional[PeerEvent] = None
    last_rejected_connection: Optional[PeerEvent] = None
    last_established_connection: Optional[PeerEvent] = None
    last_disconnection: Optional[PeerEvent] = None
    last_seen: Optional[PeerEvent] = None
    last_miss: Optional[PeerEvent] = None


class GossipPeerDetail(GossipPeer):
    """Returned by GET /network/peers/<peer_id>.

    This endpoint lists every rejected connection instead of the last one,
    and sends some counters and ports as strings. Validate it in lax mode.
    """
    last_rejected_connection: List[PeerEvent] = Field(default_factory=list)
