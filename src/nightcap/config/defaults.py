"""Default configuration values."""

import copy
from typing import Any

# Proof servers process private transaction inputs, so they always run locally
DEFAULT_PROOF_SERVER_URL = "http://localhost:6300"

DEFAULT_NETWORK = "localnet"

DEFAULT_NETWORKS: dict[str, dict[str, Any]] = {
    "localnet": {
        "name": "localnet",
        "indexer_url": "http://localhost:8088/api/v1/graphql",
        "proof_server_url": DEFAULT_PROOF_SERVER_URL,
        "node_url": "http://localhost:9944",
        "is_local": True,
    },
    "devnet": {
        "name": "devnet",
        "indexer_url": "https://indexer.devnet.midnight.network/api/v1/graphql",
        "proof_server_url": DEFAULT_PROOF_SERVER_URL,
        "node_url": "https://rpc.devnet.midnight.network",
        "is_local": False,
    },
    "preview": {
        "name": "preview",
        "indexer_url": "https://indexer.preview.midnight.network/api/v1/graphql",
        "proof_server_url": DEFAULT_PROOF_SERVER_URL,
        "node_url": "https://rpc.preview.midnight.network",
        "is_local": False,
    },
    "preprod": {
        "name": "preprod",
        "indexer_url": "https://indexer.preprod.midnight.network/api/v1/graphql",
        "proof_server_url": DEFAULT_PROOF_SERVER_URL,
        "node_url": "https://rpc.preprod.midnight.network",
        "is_local": False,
    },
    "mainnet": {
        "name": "mainnet",
        "indexer_url": "https://indexer.midnight.network/api/v1/graphql",
        "proof_server_url": DEFAULT_PROOF_SERVER_URL,
        "node_url": "https://rpc.midnight.network",
        "is_local": False,
    },
}

DEFAULT_PATHS = {
    "artifacts": "./artifacts",
    "sources": "./contracts",
    "deploy": "./deploy",
}


def create_default_config() -> dict[str, Any]:
    """Create a fresh default configuration."""
    return {
        "default_network": DEFAULT_NETWORK,
        "networks": copy.deepcopy(DEFAULT_NETWORKS),
        "docker": {"enabled": True},
        "paths": dict(DEFAULT_PATHS),
    }
