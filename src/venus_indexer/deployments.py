"""
Known deployments of the isolated pools protocol.

Each supported network maps to the pool registry and lens addresses, the block where indexing
starts, and the lens contract revision. Addresses that are not listed here must be provided in the
config file under `networks.<name>`.
"""

import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING

from eth_typing import ChecksumAddress

from venus_indexer.checksum_cache import get_checksum_address
from venus_indexer.exceptions import MissingDeploymentAddress, UnsupportedNetwork

if TYPE_CHECKING:
    from venus_indexer.config import NetworkOverrides

POOL_LENS_REVISION = "/PoolLens.sol/PoolLens.json"
LEGACY_POOL_LENS_REVISION = "/legacy/PoolLensR1.sol/PoolLensR1.json"


@dataclass(slots=True, frozen=True)
class NetworkDeployment:
    name: str
    graph_network: str
    chain_id: int
    start_block: int
    pool_lens_revision: str
    pool_registry: ChecksumAddress | None = None
    pool_lens: ChecksumAddress | None = None
    shortfall: ChecksumAddress | None = None
    omnichain_proposal_sender: ChecksumAddress | None = None

    def require_pool_registry(self) -> ChecksumAddress:
        if self.pool_registry is None:
            raise MissingDeploymentAddress(network=self.name, contract="pool_registry")
        return self.pool_registry


NETWORKS: dict[str, NetworkDeployment] = {
    deployment.name: deployment
    for deployment in (
        NetworkDeployment(
            name="docker",
            graph_network="hardhat",
            chain_id=31337,
            start_block=0,
            pool_lens_revision=POOL_LENS_REVISION,
            pool_registry=get_checksum_address("0xB06c856C8eaBd1d8321b687E188204C1018BC4E5"),
            pool_lens=get_checksum_address("0xaB7B4c595d3cE8C85e16DA86630f2fc223B05057"),
        ),
        NetworkDeployment(
            name="mainnet",
            graph_network="mainnet",
            chain_id=1,
            start_block=18_968_000,
            pool_lens_revision=LEGACY_POOL_LENS_REVISION,
        ),
        NetworkDeployment(
            name="sepolia",
            graph_network="sepolia",
            chain_id=11155111,
            start_block=3_930_059,
            pool_lens_revision=LEGACY_POOL_LENS_REVISION,
        ),
        NetworkDeployment(
            name="chapel",
            graph_network="chapel",
            chain_id=97,
            start_block=30_870_000,
            pool_lens_revision=LEGACY_POOL_LENS_REVISION,
            pool_lens=get_checksum_address("0x559936086C5f65b92240012ae0D2F70C082Ac0b0"),
        ),
        NetworkDeployment(
            name="bsc",
            graph_network="bsc",
            chain_id=56,
            start_block=29_300_000,
            pool_lens_revision=LEGACY_POOL_LENS_REVISION,
            pool_lens=get_checksum_address("0xe12da02820fAD83e0369C6De7Ae30721eaB60E32"),
        ),
        NetworkDeployment(
            name="opbnbMainnet",
            graph_network="opbnb-mainnet",
            chain_id=204,
            start_block=16_232_873,
            pool_lens_revision=LEGACY_POOL_LENS_REVISION,
        ),
        NetworkDeployment(
            name="arbitrumSepolia",
            graph_network="arbitrum-sepolia",
            chain_id=421614,
            start_block=44_214_769,
            pool_lens_revision=POOL_LENS_REVISION,
        ),
        NetworkDeployment(
            name="arbitrum",
            graph_network="arbitrum-one",
            chain_id=42161,
            start_block=216_184_381,
            pool_lens_revision=POOL_LENS_REVISION,
        ),
    )
}


def get_network_deployment(name: str) -> NetworkDeployment:
    try:
        return NETWORKS[name]
    except KeyError:
        raise UnsupportedNetwork(network=name, supported=NETWORKS) from None


def resolve_deployment(
    name: str,
    overrides: "dict[str, NetworkOverrides] | None" = None,
) -> NetworkDeployment:
    """
    Get the deployment for a network, with any values set in the config file taking precedence.
    """

    deployment = get_network_deployment(name)
    if overrides is None or (network_overrides := overrides.get(name)) is None:
        return deployment

    changes: dict[str, object] = {}
    for contract in ("pool_registry", "shortfall", "omnichain_proposal_sender"):
        if (address := getattr(network_overrides, contract)) is not None:
            changes[contract] = get_checksum_address(address)
    if network_overrides.start_block is not None:
        changes["start_block"] = network_overrides.start_block

    return dataclasses.replace(deployment, **changes)
