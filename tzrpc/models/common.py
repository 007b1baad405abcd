from typing import Optional
from pydantic import BaseModel


class Metadata(BaseModel):
    """Connection metadata advertised by a node."""
    disable_mempool: bool = False
    private_node: bool = False


class Point(BaseModel):
    """Address and port of a peer."""
    addr: str
    port: Optional[int] = None


class PeerEvent(BaseModel):
    """Where and when a connection event last happened."""
    addr: str
    port: Optional[int] = None
    timestamp: Optional[int] = None
