"""
Exceptions defined here are raised while resolving network deployments.
"""

from collections.abc import Iterable

from venus_indexer.exceptions.base import VenusIndexerError


class NetworkError(VenusIndexerError):
    """
    Exception raised while resolving a network deployment.
    """


class UnsupportedNetwork(NetworkError):
    """
    Raised when a network name is not in the set of recognized deployments.
    """

    def __init__(self, network: str, supported: Iterable[str]) -> None:
        self.network = network
        self.supported = tuple(supported)
        super().__init__(
            message=f"Network {network!r} is not supported. Must be one of {', '.join(self.supported)}"
        )


class MissingDeploymentAddress(NetworkError):
    """
    Raised when a contract address required by the indexer is not known for a network, and has not
    been set in the config file.
    """

    def __init__(self, network: str, contract: str) -> None:
        self.network = network
        self.contract = contract
        super().__init__(
            message=f"No {contract} address is known for network {network!r}. Set "
            f"'networks.{network}.{contract}' in the config file."
        )
