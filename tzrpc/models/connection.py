from typing import Optional, List
from pydantic import BaseModel, Field

from .common import Metadata, Point


class Version(BaseModel):
    """Protocol version supported on a connection."""
    name: str
    major: int = 0
    minor: int = 0


class ConnectionInfo(BaseModel):
    """Returned by GET /network/connections and /network/connections/<peer_id>."""
    incoming: bool = False
    peer_id: str
    id_point: Point
    remote_socket_port: Optional[int] = None
    versions: List[Version] = Field(default_factory=list)
    private: bool = False
    local_metadata: Metadata = Field(default_factory=Metadata)
    remote_metadata: Metadata = Field(default_factory=Metadata)
