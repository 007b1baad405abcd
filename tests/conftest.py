"""
Shared fixtures: a NetworkRPC wired to an in-process fake node.
"""

import httpx
import pytest
import pytest_asyncio

from tzrpc.core.network import NetworkRPC

BASE_URL = "http://node.test:8732"

PEER_A = "idrpUzAc2gTWLRs8YnWwdjGDhYu9jB"
PEER_B = "idsXeq1QMtHHK5Ue3gYYmKHobeLVyN"
PEER_C = "idtmNAiDdkvx8bz25pwvKwHgEYkASN"


@pytest.fixture
def connection_data() -> dict:
    """One entry of GET /network/connections."""
    return {
        "incoming": False,
        "peer_id": PEER_A,
        "id_point": {"addr": "::ffff:51.15.220.7", "port": 9732},
        "remote_socket_port": 9732,
        "versions": [
            {"name": "TEZOS_MAINNET", "major": 0, "minor": 0},
            {"name": "TEZOS_MAINNET", "major": 0, "minor": 1},
        ],
        "private": False,
        "local_metadata": {"disable_mempool": False, "private_node": False},
        "remote_metadata": {"disable_mempool": True, "private_node": False},
    }


@pytest.fixture
def peer_data() -> dict:
    """One entry of GET /network/peers, numbers sent as numbers."""
    return {
        "score": 42,
        "trusted": True,
        "conn_metadata": {"disable_mempool": False, "private_node": False},
        "state": "running",
        "reachable_at": {"addr": "::ffff:34.255.45.153", "port": 9732},
        "stat": {
            "total_sent": 1024,
            "total_recv": 2048,
            "current_inflow": 12,
            "current_outflow": 7,
        },
        "last_established_connection": {
            "addr": "::ffff:34.255.45.153",
            "port": 9732,
            "timestamp": 1546300800,
        },
        "last_seen": {
            "addr": "::ffff:34.255.45.153",
            "port": 9732,
            "timestamp": 1546300900,
        },
    }


@pytest_asyncio.fixture
async def make_rpc():
    """Build a NetworkRPC whose requests are answered by ``handler``."""
    clients = []

    def _make(handler) -> NetworkRPC:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return NetworkRPC(url=BASE_URL, client=client)

    yield _make

    for client in clients:
        await client.aclose()
