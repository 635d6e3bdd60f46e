"""
Network commands for activating deployments and indexing their events.

CLI Commands:
    network list - Show the supported networks and their indexing status
    network show [name] - Show the deployment used for a network, including config file overrides
    network activate [name] - Include the network in subsequent updates
    network deactivate [name] - Exclude the network from subsequent updates; indexed data is kept
    network update - Index events for all active networks up to the given block

Each update resumes from the block after the last committed chunk. A chunk is committed only after
every event in it has been processed, so an interrupted update can be re-run safely.
"""

import click
import tqdm
from sqlalchemy import select
from sqlalchemy.orm import Session

from venus_indexer.cli import cli
from venus_indexer.cli.utils import get_web3_from_config, resolve_block_identifier
from venus_indexer.config import CONFIG_FILE, settings
from venus_indexer.database.models import IndexedNetworkTable
from venus_indexer.deployments import NETWORKS, NetworkDeployment, resolve_deployment
from venus_indexer.exceptions import VenusIndexerError
from venus_indexer.functions import get_number_for_block_identifier
from venus_indexer.indexer import update_network
from venus_indexer.logging import logger


def _get_indexed_network(session: Session, name: str) -> IndexedNetworkTable | None:
    return session.scalar(select(IndexedNetworkTable).where(IndexedNetworkTable.name == name))


def _resolve(name: str) -> NetworkDeployment:
    try:
        return resolve_deployment(name, settings.networks)
    except VenusIndexerError as exc:
        raise click.BadParameter(exc.message, param_hint="NAME") from None


@cli.group()
def network() -> None:
    """
    Network commands
    """


@network.command("list")
def network_list() -> None:
    """
    List the supported networks.
    """

    from venus_indexer.database.connection import db_session

    with db_session() as session:
        for name in NETWORKS:
            deployment = resolve_deployment(name, settings.networks)
            indexed_network = _get_indexed_network(session, name)
            match indexed_network:
                case None:
                    status = "inactive"
                case IndexedNetworkTable(active=True, last_update_block=None):
                    status = "active, not yet updated"
                case IndexedNetworkTable(active=True):
                    status = f"active, updated to block {indexed_network.last_update_block:,}"
                case _:
                    status = "inactive"
            click.echo(f"{name} (chain ID {deployment.chain_id}): {status}")


@network.command("show")
@click.argument("name")
def network_show(name: str) -> None:
    """
    Show the deployment for a network.
    """

    deployment = _resolve(name)
    click.echo(f"name: {deployment.name}")
    click.echo(f"graph network: {deployment.graph_network}")
    click.echo(f"chain ID: {deployment.chain_id}")
    click.echo(f"start block: {deployment.start_block}")
    click.echo(f"pool lens revision: {deployment.pool_lens_revision}")
    for contract in ("pool_registry", "pool_lens", "shortfall", "omnichain_proposal_sender"):
        address = getattr(deployment, contract)
        click.echo(f"{contract.replace('_', ' ')}: {'not set' if address is None else address}")


@network.command("activate")
@click.argument("name")
def network_activate(name: str) -> None:
    """
    Activate a network.

    Activated networks are included when running `venus-indexer network update`.

    Only the docker deployment has a built-in pool registry address. For other networks, set
    `pool_registry` in the `networks.<name>` table of the config file before updating.
    """

    from venus_indexer.database.connection import db_session

    deployment = _resolve(name)

    with db_session() as session:
        if (indexed_network := _get_indexed_network(session, name)) is not None:
            indexed_network.active = True
        else:
            session.add(
                IndexedNetworkTable(
                    name=name,
                    chain_id=deployment.chain_id,
                    active=True,
                    last_update_block=None,
                )
            )
        session.commit()

    click.echo(f"Activated {name} (chain ID {deployment.chain_id}).")
    if deployment.pool_registry is None:
        click.echo(
            f"No pool registry address is known for {name}. Set networks.{name}.pool_registry in "
            f"{CONFIG_FILE} before running `venus-indexer network update`."
        )


@network.command("deactivate")
@click.argument("name")
def network_deactivate(name: str) -> None:
    """
    Deactivate a network.

    Data for a deactivated network is kept, but the network is excluded from updates.
    """

    from venus_indexer.database.connection import db_session

    with db_session() as session:
        indexed_network = _get_indexed_network(session, name)

        if indexed_network is None:
            click.echo(f"The database has no entry for {name}.")
            return

        if not indexed_network.active:
            return
        indexed_network.active = False
        session.commit()

    click.echo(f"Deactivated {name}.")


@network.command(
    "update",
    help="Index events for active networks.",
)
@click.option(
    "--chunk",
    "chunk_size",
    default=10_000,
    show_default=True,
    help="The maximum number of blocks to process before committing changes to the database.",
)
@click.option(
    "--to-block",
    "to_block",
    default="latest:-64",
    show_default=True,
    help=(
        "The last block in the update range. Must be a block number or a valid block identifier: "
        "'earliest', 'finalized', 'safe', 'latest', 'pending'. An identifier can be given with an "
        "optional offset, e.g. 'latest:-64' stops 64 blocks before the chain tip."
    ),
)
@click.option(
    "--no-progress",
    "no_progress",
    is_flag=True,
    default=False,
    show_default=True,
    help="Disable progress bars.",
)
def network_update(
    *,
    chunk_size: int,
    to_block: str,
    no_progress: bool,
) -> None:
    from venus_indexer.database.connection import db_session

    with db_session() as session:
        active_networks = session.scalars(
            select(IndexedNetworkTable).where(IndexedNetworkTable.active)
        ).all()

        if not active_networks:
            click.echo("No active networks.")
            return

        for indexed_network in active_networks:
            deployment = _resolve(indexed_network.name)
            w3 = get_web3_from_config(chain_id=deployment.chain_id)

            initial_start_block = working_start_block = (
                deployment.start_block
                if indexed_network.last_update_block is None
                else indexed_network.last_update_block + 1
            )

            last_block = resolve_block_identifier(w3, to_block)
            if last_block > get_number_for_block_identifier(identifier="latest", w3=w3):
                raise click.BadParameter(
                    f"{to_block} is ahead of the current chain tip.", param_hint="--to-block"
                )

            if initial_start_block > last_block:
                click.echo(f"{indexed_network.name} has not advanced since the last update.")
                continue

            block_pbar = tqdm.tqdm(
                total=last_block - initial_start_block + 1,
                bar_format="{desc} {percentage:3.1f}% |{bar}|",
                leave=False,
                disable=no_progress,
            )

            while True:
                working_end_block = min(last_block, working_start_block + chunk_size - 1)

                block_pbar.set_description(
                    f"Processing block range {working_start_block:,} -> {working_end_block:,}"
                )
                block_pbar.refresh()

                try:
                    update_network(
                        w3=w3,
                        session=session,
                        deployment=deployment,
                        start_block=working_start_block,
                        end_block=working_end_block,
                        no_progress=no_progress,
                    )
                except Exception:
                    session.rollback()
                    logger.exception(
                        f"Processing failed for {indexed_network.name} in block range "
                        f"{working_start_block:,} -> {working_end_block:,}"
                    )
                    raise

                indexed_network.last_update_block = working_end_block
                session.commit()

                block_pbar.n = working_end_block - initial_start_block + 1

                if working_end_block == last_block:
                    break
                working_start_block = working_end_block + 1

            block_pbar.close()
            click.echo(f"Updated {indexed_network.name} to block {last_block:,}.")
