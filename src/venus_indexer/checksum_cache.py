"""
Cached address checksumming.

Every decoded log, contract read and accessor call checksums the same small set of pool, market and
account addresses, so results are memoized.
"""

import functools

from cchecksum import to_checksum_address
from eth_typing import ChecksumAddress, HexAddress


@functools.lru_cache(maxsize=8192)
def get_checksum_address(address: HexAddress | str | bytes) -> ChecksumAddress:
    return to_checksum_address(address)
