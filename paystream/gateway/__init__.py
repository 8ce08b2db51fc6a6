from paystream.core.config import GatewaySettings
from paystream.gateway.base import ChainGateway, network_name
from paystream.gateway.mock import MockChainGateway
from paystream.gateway.rpc import JsonRpcChainGateway


def build_gateway(config: GatewaySettings) -> ChainGateway:
    """Construct the gateway selected by GATEWAY_MODE."""
    if config.mode == "rpc":
        return JsonRpcChainGateway(config.rpc_url, from_address=config.from_address, timeout=config.rpc_timeout)
    if config.mode == "mock":
        return MockChainGateway(
            account=config.mock_account,
            network=config.mock_network,
            failure_rate=config.mock_failure_rate,
            min_delay=config.mock_min_delay,
            max_delay=config.mock_max_delay,
        )
    raise ValueError(f"Unknown GATEWAY_MODE: {config.mode}")


__all__ = [
    "ChainGateway",
    "MockChainGateway",
    "JsonRpcChainGateway",
    "build_gateway",
    "network_name",
]
