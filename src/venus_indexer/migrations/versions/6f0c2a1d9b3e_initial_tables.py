"""Initial tables

Revision ID: 6f0c2a1d9b3e
Revises:
Create Date: 2026-10-19 09:12:44.120385

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

import venus_indexer.database.models

# revision identifiers, used by Alembic.
revision: str = "6f0c2a1d9b3e"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _int() -> venus_indexer.database.models.base.IntMappedToString:
    return venus_indexer.database.models.base.IntMappedToString(length=78)


def _decimal() -> venus_indexer.database.models.base.DecimalMappedToString:
    return venus_indexer.database.models.base.DecimalMappedToString(length=160)


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "indexed_networks",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("chain_id", sa.Integer(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("last_update_block", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "trusted_remotes",
        sa.Column("id", sa.String(length=200), nullable=False),
        sa.Column("address", sa.String(length=42), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=200), nullable=False),
        sa.Column("address", sa.String(length=42), nullable=False),
        sa.Column("count_liquidated", sa.Integer(), nullable=False),
        sa.Column("count_liquidator", sa.Integer(), nullable=False),
        sa.Column("has_borrowed", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "auctions",
        sa.Column("id", sa.String(length=200), nullable=False),
        sa.Column("comptroller_address", sa.String(length=42), nullable=False),
        sa.Column(
            "status",
            sa.Enum("NOT_STARTED", "STARTED", "ENDED", name="auctionstatus"),
            nullable=False,
        ),
        sa.Column(
            "type",
            sa.Enum("LARGE_POOL_DEBT", "LARGE_RISK_FUND", name="auctiontype"),
            nullable=False,
        ),
        sa.Column("start_block", sa.Integer(), nullable=False),
        sa.Column("seized_risk_fund_mantissa", _int(), nullable=False),
        sa.Column("start_bid_bps", sa.Integer(), nullable=False),
        sa.Column("markets", sa.JSON(), nullable=False),
        sa.Column("markets_debt", sa.JSON(), nullable=False),
        sa.Column("highest_bidder", sa.String(length=42), nullable=True),
        sa.Column("highest_bid_bps", sa.Integer(), nullable=True),
        sa.Column("highest_bid_block", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "pools",
        sa.Column("id", sa.String(length=200), nullable=False),
        sa.Column("address", sa.String(length=42), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("creator", sa.String(length=42), nullable=True),
        sa.Column("block_posted", sa.Integer(), nullable=True),
        sa.Column("timestamp_posted", sa.Integer(), nullable=True),
        sa.Column("risk_rating", sa.Text(), nullable=True),
        sa.Column("category", sa.Text(), nullable=True),
        sa.Column("logo_url", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price_oracle_address", sa.String(length=42), nullable=True),
        sa.Column("close_factor_mantissa", _int(), nullable=False),
        sa.Column("liquidation_incentive_mantissa", _int(), nullable=False),
        sa.Column("min_liquidatable_collateral_mantissa", _int(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "markets",
        sa.Column("id", sa.String(length=200), nullable=False),
        sa.Column("pool_id", sa.String(length=200), nullable=False),
        sa.Column("address", sa.String(length=42), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("symbol", sa.Text(), nullable=False),
        sa.Column("vtoken_decimals", sa.Integer(), nullable=False),
        sa.Column("underlying_address", sa.String(length=42), nullable=False),
        sa.Column("underlying_name", sa.Text(), nullable=False),
        sa.Column("underlying_symbol", sa.Text(), nullable=False),
        sa.Column("underlying_decimals", sa.Integer(), nullable=False),
        sa.Column("interest_rate_model_address", sa.String(length=42), nullable=False),
        sa.Column("access_control_manager_address", sa.String(length=42), nullable=True),
        sa.Column("accrual_block_number", sa.Integer(), nullable=False),
        sa.Column("block_timestamp", sa.Integer(), nullable=False),
        sa.Column("borrow_rate_mantissa", _int(), nullable=False),
        sa.Column("borrow_rate", _decimal(), nullable=False),
        sa.Column("supply_rate_mantissa", _int(), nullable=False),
        sa.Column("supply_rate", _decimal(), nullable=False),
        sa.Column("cash_mantissa", _int(), nullable=False),
        sa.Column("cash", _decimal(), nullable=False),
        sa.Column("exchange_rate_mantissa", _int(), nullable=False),
        sa.Column("exchange_rate", _decimal(), nullable=False),
        sa.Column("borrow_index_mantissa", _int(), nullable=False),
        sa.Column("borrow_index", _decimal(), nullable=False),
        sa.Column("underlying_price_mantissa", _int(), nullable=False),
        sa.Column("underlying_price", _decimal(), nullable=False),
        sa.Column("reserves_mantissa", _int(), nullable=False),
        sa.Column("reserve_factor_mantissa", _int(), nullable=False),
        sa.Column("treasury_total_supply_mantissa", _int(), nullable=False),
        sa.Column("treasury_total_borrows_mantissa", _int(), nullable=False),
        sa.Column("bad_debt_mantissa", _int(), nullable=False),
        sa.Column("collateral_factor_mantissa", _int(), nullable=False),
        sa.Column("liquidation_threshold_mantissa", _int(), nullable=False),
        sa.Column("supply_cap_mantissa", _int(), nullable=False),
        sa.Column("borrow_cap_mantissa", _int(), nullable=False),
        sa.Column("supplier_count", sa.Integer(), nullable=False),
        sa.Column("borrower_count", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["pool_id"],
            ["pools.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("markets", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_markets_pool_id"), ["pool_id"], unique=False)

    op.create_table(
        "rewards_distributors",
        sa.Column("id", sa.String(length=200), nullable=False),
        sa.Column("pool_id", sa.String(length=200), nullable=False),
        sa.Column("address", sa.String(length=42), nullable=False),
        sa.Column("reward_token_address", sa.String(length=42), nullable=False),
        sa.ForeignKeyConstraint(
            ["pool_id"],
            ["pools.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("rewards_distributors", schema=None) as batch_op:
        batch_op.create_index(
            batch_op.f("ix_rewards_distributors_pool_id"), ["pool_id"], unique=False
        )

    op.create_table(
        "account_vtokens",
        sa.Column("id", sa.String(length=200), nullable=False),
        sa.Column("market_id", sa.String(length=200), nullable=False),
        sa.Column("account_id", sa.String(length=200), nullable=False),
        sa.Column("symbol", sa.Text(), nullable=False),
        sa.Column("entered_market", sa.Boolean(), nullable=False),
        sa.Column("accrual_block_number", sa.Integer(), nullable=False),
        sa.Column("supply_balance_mantissa", _int(), nullable=False),
        sa.Column("supply_balance", _decimal(), nullable=False),
        sa.Column("borrow_balance_mantissa", _int(), nullable=False),
        sa.Column("borrow_balance", _decimal(), nullable=False),
        sa.Column("borrow_index_mantissa", _int(), nullable=False),
        sa.Column("total_underlying_redeemed_mantissa", _int(), nullable=False),
        sa.Column("total_underlying_repaid_mantissa", _int(), nullable=False),
        sa.ForeignKeyConstraint(
            ["account_id"],
            ["accounts.id"],
        ),
        sa.ForeignKeyConstraint(
            ["market_id"],
            ["markets.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("account_vtokens", schema=None) as batch_op:
        batch_op.create_index(
            batch_op.f("ix_account_vtokens_account_id"), ["account_id"], unique=False
        )
        batch_op.create_index(batch_op.f("ix_account_vtokens_market_id"), ["market_id"], unique=False)

    op.create_table(
        "reward_speeds",
        sa.Column("id", sa.String(length=200), nullable=False),
        sa.Column("rewards_distributor_id", sa.String(length=200), nullable=False),
        sa.Column("market_id", sa.String(length=200), nullable=False),
        sa.Column("supply_speed_per_block_mantissa", _int(), nullable=False),
        sa.Column("borrow_speed_per_block_mantissa", _int(), nullable=False),
        sa.ForeignKeyConstraint(
            ["market_id"],
            ["markets.id"],
        ),
        sa.ForeignKeyConstraint(
            ["rewards_distributor_id"],
            ["rewards_distributors.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("reward_speeds", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_reward_speeds_market_id"), ["market_id"], unique=False)
        batch_op.create_index(
            batch_op.f("ix_reward_speeds_rewards_distributor_id"),
            ["rewards_distributor_id"],
            unique=False,
        )

    op.create_table(
        "transactions",
        sa.Column("id", sa.String(length=200), nullable=False),
        sa.Column("market_id", sa.String(length=200), nullable=False),
        sa.Column(
            "type",
            sa.Enum(
                "MINT",
                "REDEEM",
                "BORROW",
                "REPAY",
                "LIQUIDATE",
                "TRANSFER",
                name="transactiontype",
            ),
            nullable=False,
        ),
        sa.Column("from_address", sa.String(length=42), nullable=False),
        sa.Column("to_address", sa.String(length=42), nullable=False),
        sa.Column("amount_mantissa", _int(), nullable=False),
        sa.Column("amount", _decimal(), nullable=False),
        sa.Column("underlying_amount_mantissa", _int(), nullable=True),
        sa.Column("underlying_amount", _decimal(), nullable=True),
        sa.Column("underlying_repay_amount_mantissa", _int(), nullable=True),
        sa.Column("underlying_repay_amount", _decimal(), nullable=True),
        sa.Column("tx_hash", sa.String(length=66), nullable=False),
        sa.Column("log_index", sa.Integer(), nullable=False),
        sa.Column("block_number", sa.Integer(), nullable=False),
        sa.Column("block_time", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["market_id"],
            ["markets.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("transactions", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_transactions_market_id"), ["market_id"], unique=False)

    op.create_table(
        "account_vtoken_transactions",
        sa.Column("id", sa.String(length=200), nullable=False),
        sa.Column("account_vtoken_id", sa.String(length=200), nullable=False),
        sa.Column("tx_hash", sa.String(length=66), nullable=False),
        sa.Column("timestamp", sa.Integer(), nullable=False),
        sa.Column("block", sa.Integer(), nullable=False),
        sa.Column("log_index", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["account_vtoken_id"],
            ["account_vtokens.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("account_vtoken_transactions", schema=None) as batch_op:
        batch_op.create_index(
            batch_op.f("ix_account_vtoken_transactions_account_vtoken_id"),
            ["account_vtoken_id"],
            unique=False,
        )

    op.create_table(
        "account_vtoken_bad_debts",
        sa.Column("id", sa.String(length=200), nullable=False),
        sa.Column("account_vtoken_id", sa.String(length=200), nullable=False),
        sa.Column("amount_mantissa", _int(), nullable=False),
        sa.Column("block", sa.Integer(), nullable=False),
        sa.Column("timestamp", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["account_vtoken_id"],
            ["account_vtokens.id"],
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("account_vtoken_bad_debts", schema=None) as batch_op:
        batch_op.create_index(
            batch_op.f("ix_account_vtoken_bad_debts_account_vtoken_id"),
            ["account_vtoken_id"],
            unique=False,
        )


def downgrade() -> None:
    """Downgrade schema."""

    for table_name, index_names in (
        ("account_vtoken_bad_debts", ("ix_account_vtoken_bad_debts_account_vtoken_id",)),
        ("account_vtoken_transactions", ("ix_account_vtoken_transactions_account_vtoken_id",)),
        ("transactions", ("ix_transactions_market_id",)),
        (
            "reward_speeds",
            ("ix_reward_speeds_rewards_distributor_id", "ix_reward_speeds_market_id"),
        ),
        ("account_vtokens", ("ix_account_vtokens_market_id", "ix_account_vtokens_account_id")),
        ("rewards_distributors", ("ix_rewards_distributors_pool_id",)),
        ("markets", ("ix_markets_pool_id",)),
    ):
        with op.batch_alter_table(table_name, schema=None) as batch_op:
            for index_name in index_names:
                batch_op.drop_index(batch_op.f(index_name))
        op.drop_table(table_name)

    for table_name in ("pools", "auctions", "accounts", "trusted_remotes", "indexed_networks"):
        op.drop_table(table_name)
