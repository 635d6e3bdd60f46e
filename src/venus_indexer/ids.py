"""
Deterministic entity ids.

Ids are composed from lowercase hex addresses and hashes, joined with '-'. Addresses and hashes are
fixed-width hex strings and log indices are decimal integers, so distinct inputs never produce the
same id. Changing any of these functions breaks continuity with previously indexed data.
"""

from hexbytes import HexBytes

SEPARATOR = "-"


def _hex(value: str | bytes) -> str:
    if isinstance(value, str):
        return value.lower()
    return HexBytes(value).to_0x_hex()


def get_pool_id(comptroller: str) -> str:
    return _hex(comptroller)


def get_market_id(vtoken: str) -> str:
    return _hex(vtoken)


def get_account_id(account: str) -> str:
    return _hex(account)


def get_auction_id(comptroller: str) -> str:
    return _hex(comptroller)


def get_rewards_distributor_id(rewards_distributor: str) -> str:
    return _hex(rewards_distributor)


def get_account_vtoken_id(market: str, account: str) -> str:
    return SEPARATOR.join((_hex(market), _hex(account)))


def get_reward_speed_id(rewards_distributor: str, market: str) -> str:
    return SEPARATOR.join((_hex(rewards_distributor), _hex(market)))


def get_transaction_event_id(tx_hash: str | bytes, log_index: int) -> str:
    return SEPARATOR.join((_hex(tx_hash), str(log_index)))


def get_account_vtoken_transaction_id(account: str, tx_hash: str | bytes, log_index: int) -> str:
    return SEPARATOR.join((_hex(account), _hex(tx_hash), str(log_index)))


def get_bad_debt_event_id(tx_hash: str | bytes, log_index: int) -> str:
    return SEPARATOR.join((_hex(tx_hash), str(log_index)))


def get_trusted_remote_id(remote_chain_id: int) -> str:
    return str(remote_chain_id)


def get_remote_proposal_id(proposal_id: int) -> str:
    return str(proposal_id)
