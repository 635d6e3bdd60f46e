from sqlalchemy import JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Address, Base, BigInteger
from .types import PrimaryKeyEntityId, TransactionHash


class TrustedRemoteTable(Base):
    """
    A destination chain trusted by the omnichain proposal sender, keyed by the remote chain id.
    """

    __tablename__ = "trusted_remotes"

    id: Mapped[PrimaryKeyEntityId]
    address: Mapped[Address]
    active: Mapped[bool]

    proposals: Mapped[list["RemoteProposalTable"]] = relationship(
        "RemoteProposalTable",
        back_populates="trusted_remote",
        order_by="RemoteProposalTable.proposal_id",
    )


class RemoteProposalTable(Base):
    """
    A proposal sent to a remote chain by the omnichain proposal sender, keyed by proposal id.

    The proposal actions are decoded from the payload carried by the first event seen for the
    proposal. `stored` is the transaction that sent the proposal or stored its payload after a
    failed send, `executed` the one that delivered it to the LayerZero endpoint, and `withdrawn` the
    one that cleared a stored payload.
    """

    __tablename__ = "remote_proposals"

    id: Mapped[PrimaryKeyEntityId]
    proposal_id: Mapped[BigInteger]
    layer_zero_chain_id: Mapped[int]
    trusted_remote_id: Mapped[str | None] = mapped_column(
        ForeignKey("trusted_remotes.id"), index=True
    )

    # Proposal actions. Values are decimal strings and calldatas are hex strings
    targets: Mapped[list[str]] = mapped_column(JSON)
    values: Mapped[list[str]] = mapped_column(JSON)
    signatures: Mapped[list[str]] = mapped_column(JSON)
    calldatas: Mapped[list[str]] = mapped_column(JSON)
    proposal_type: Mapped[int]

    stored_tx_hash: Mapped[TransactionHash | None]
    stored_block: Mapped[int | None]
    stored_timestamp: Mapped[int | None]
    executed_tx_hash: Mapped[TransactionHash | None]
    executed_block: Mapped[int | None]
    executed_timestamp: Mapped[int | None]
    withdrawn_tx_hash: Mapped[TransactionHash | None]
    withdrawn_block: Mapped[int | None]
    withdrawn_timestamp: Mapped[int | None]
    failed_reason: Mapped[str | None]

    trusted_remote: Mapped[TrustedRemoteTable | None] = relationship(
        "TrustedRemoteTable", back_populates="proposals"
    )
