from hexbytes import HexBytes
from sqlalchemy import select

from venus_indexer.checksum_cache import get_checksum_address
from venus_indexer.database.models import RemoteProposalTable, TrustedRemoteTable
from venus_indexer.ids import get_trusted_remote_id
from venus_indexer.logging import logger

from .accessors import (
    get_or_create_remote_proposal,
    get_or_create_trusted_remote,
    get_remote_proposal,
)
from .context import EventHandlerContext


def handle_set_trusted_remote_address(context: EventHandlerContext) -> None:
    params = context.event.params

    # The remote address is the leading 20 bytes; a full LayerZero path appends the local address
    address = get_checksum_address(HexBytes(params["newRemoteAddress"][:20]).to_0x_hex())

    trusted_remote = get_or_create_trusted_remote(
        context.session,
        remote_chain_id=params["remoteChainId"],
        address=address,
    )
    trusted_remote.address = address
    trusted_remote.active = True


def handle_trusted_remote_removed(context: EventHandlerContext) -> None:
    chain_id = context.event.params["chainId"]

    if (
        trusted_remote := context.session.scalar(
            select(TrustedRemoteTable).where(
                TrustedRemoteTable.id == get_trusted_remote_id(chain_id)
            )
        )
    ) is None:
        logger.warning(f"Trusted remote for chain {chain_id} was removed before it was indexed")
        return

    trusted_remote.active = False


def _mark_stored(context: EventHandlerContext, remote_proposal: RemoteProposalTable) -> None:
    if remote_proposal.stored_tx_hash is not None:
        return

    event = context.event
    remote_proposal.stored_tx_hash = event.transaction_hash.to_0x_hex()
    remote_proposal.stored_block = event.block_number
    remote_proposal.stored_timestamp = event.block_timestamp


def handle_execute_remote_proposal(context: EventHandlerContext) -> None:
    event = context.event
    params = event.params

    remote_proposal = get_or_create_remote_proposal(
        context.session,
        proposal_id=params["proposalId"],
        remote_chain_id=params["remoteChainId"],
        payload=params["payload"],
    )
    _mark_stored(context, remote_proposal)
    remote_proposal.executed_tx_hash = event.transaction_hash.to_0x_hex()
    remote_proposal.executed_block = event.block_number
    remote_proposal.executed_timestamp = event.block_timestamp
    remote_proposal.failed_reason = None


def handle_store_payload(context: EventHandlerContext) -> None:
    """
    A send that failed at the LayerZero endpoint. The payload is kept by the sender for a retry.
    """

    params = context.event.params

    remote_proposal = get_or_create_remote_proposal(
        context.session,
        proposal_id=params["proposalId"],
        remote_chain_id=params["remoteChainId"],
        payload=params["payload"],
    )
    _mark_stored(context, remote_proposal)
    remote_proposal.failed_reason = params["reason"].to_0x_hex()


def handle_clear_payload(context: EventHandlerContext) -> None:
    event = context.event
    proposal_id = event.params["proposalId"]

    if (remote_proposal := get_remote_proposal(context.session, proposal_id)) is None:
        logger.warning(f"Payload cleared for remote proposal {proposal_id} before it was indexed")
        return

    remote_proposal.withdrawn_tx_hash = event.transaction_hash.to_0x_hex()
    remote_proposal.withdrawn_block = event.block_number
    remote_proposal.withdrawn_timestamp = event.block_timestamp
