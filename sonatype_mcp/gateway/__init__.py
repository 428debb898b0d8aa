from .client import FirewallClient, NexusClient, RestGatewayClient

__all__ = [
    "FirewallClient",
    "NexusClient",
    "RestGatewayClient",
]
