from json import JSONDecodeError
from pathlib import Path
from typing import TYPE_CHECKING, cast

from pydantic import HttpUrl, WebsocketUrl
from ujson import loads as ujson_loads
from web3 import HTTPProvider, IPCProvider, JSONBaseProvider, LegacyWebSocketProvider, Web3
from web3.types import BlockParams, RPCResponse

from venus_indexer.config import CONFIG_FILE, settings
from venus_indexer.exceptions import VenusIndexerValueError
from venus_indexer.functions import get_number_for_block_identifier

BLOCK_TAGS = {"latest", "earliest", "pending", "safe", "finalized"}


def _fast_decode_rpc_response(raw_response: bytes) -> RPCResponse:
    """
    Decode the JSON-RPC response using ujson.
    """

    try:
        return cast("RPCResponse", ujson_loads(raw_response))
    except ValueError:
        # Re-raise as a dummy JSONDecodeError so web3py's exception handling works as intended.
        msg = "JSON failure"
        raise JSONDecodeError(msg, "[]", 0) from None


def get_web3_from_config(*, chain_id: int, optimize: bool = True) -> Web3:
    match endpoint := settings.rpc.get(chain_id):
        case HttpUrl():
            w3 = Web3(HTTPProvider(str(endpoint)))
        case WebsocketUrl():
            w3 = Web3(LegacyWebSocketProvider(str(endpoint)))
        case Path():
            w3 = Web3(IPCProvider(str(endpoint)))
        case None:
            raise VenusIndexerValueError(
                message=f"Chain ID {chain_id} does not have an RPC defined in config file "
                f"{CONFIG_FILE}"
            )

    if w3.eth.chain_id != chain_id:
        raise VenusIndexerValueError(
            message=f"The chain ID ({w3.eth.chain_id}) at endpoint {endpoint} does not match "
            f"the chain ID ({chain_id}) defined in the config file."
        )

    if optimize:
        # Remove all middleware and replace the JSON decoding for RPC responses
        w3.middleware_onion.clear()
        if TYPE_CHECKING:
            assert isinstance(w3.provider, JSONBaseProvider)
        w3.provider.decode_rpc_response = _fast_decode_rpc_response  # type:ignore[method-assign]

    return w3


def resolve_block_identifier(w3: Web3, identifier: str) -> int:
    """
    Resolve a block number, a block tag, or a block tag with an offset (e.g. 'latest:-64') to a
    block number.
    """

    if identifier.isdigit():
        return int(identifier)

    if ":" in identifier:
        block_tag, offset = identifier.split(":", 1)
        block_offset = int(offset.strip())
    else:
        block_tag = identifier
        block_offset = 0

    if block_tag not in BLOCK_TAGS:
        raise VenusIndexerValueError(message=f"Invalid block tag: {block_tag}")

    return (
        get_number_for_block_identifier(identifier=cast("BlockParams", block_tag), w3=w3)
        + block_offset
    )
