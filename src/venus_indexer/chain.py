"""
Read-only access to contract state.

Event handlers never talk to a node directly. They receive a `ChainReader`, whose single primitive
`call` performs one contract call and returns the decoded result tuple. The typed helpers wrap the
fixed set of calls used by the handlers.
"""

import abc
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from eth_typing import ChecksumAddress
from web3 import Web3
from web3.types import BlockIdentifier

from venus_indexer.checksum_cache import get_checksum_address
from venus_indexer.functions import (
    encode_function_calldata,
    extract_argument_types_from_function_prototype,
    raw_call,
)
from venus_indexer.logging import logger


@dataclass(slots=True, frozen=True)
class AccountSnapshot:
    error: int
    vtoken_balance: int
    borrow_balance: int
    exchange_rate: int


class ChainReader(abc.ABC):
    """
    Base class for contract readers. Subclasses must implement `call`.
    """

    @abc.abstractmethod
    def call(
        self,
        address: str,
        function_prototype: str,
        arguments: Sequence[Any] = (),
        return_types: Sequence[str] = (),
    ) -> tuple[Any, ...]:
        """
        Call the function on the contract and return the decoded results.
        """

    def _call_one(
        self,
        address: str,
        function_prototype: str,
        return_type: str,
        arguments: Sequence[Any] = (),
    ) -> Any:
        (result,) = self.call(
            address=address,
            function_prototype=function_prototype,
            arguments=arguments,
            return_types=[return_type],
        )
        return result

    def _call_address(self, address: str, function_prototype: str) -> ChecksumAddress:
        return get_checksum_address(self._call_one(address, function_prototype, "address"))

    def _call_uint(self, address: str, function_prototype: str) -> int:
        return int(self._call_one(address, function_prototype, "uint256"))

    # vToken
    def get_account_snapshot(self, vtoken: str, account: str) -> AccountSnapshot:
        error, vtoken_balance, borrow_balance, exchange_rate = self.call(
            address=vtoken,
            function_prototype="getAccountSnapshot(address)",
            arguments=[account],
            return_types=["uint256", "uint256", "uint256", "uint256"],
        )
        return AccountSnapshot(
            error=error,
            vtoken_balance=vtoken_balance,
            borrow_balance=borrow_balance,
            exchange_rate=exchange_rate,
        )

    def comptroller(self, vtoken: str) -> ChecksumAddress:
        return self._call_address(vtoken, "comptroller()")

    def underlying(self, vtoken: str) -> ChecksumAddress:
        return self._call_address(vtoken, "underlying()")

    def interest_rate_model(self, vtoken: str) -> ChecksumAddress:
        return self._call_address(vtoken, "interestRateModel()")

    def reserve_factor_mantissa(self, vtoken: str) -> int:
        return self._call_uint(vtoken, "reserveFactorMantissa()")

    def accrual_block_number(self, vtoken: str) -> int:
        return self._call_uint(vtoken, "accrualBlockNumber()")

    def total_supply(self, vtoken: str) -> int:
        return self._call_uint(vtoken, "totalSupply()")

    def exchange_rate_stored(self, vtoken: str) -> int:
        return self._call_uint(vtoken, "exchangeRateStored()")

    def borrow_index(self, vtoken: str) -> int:
        return self._call_uint(vtoken, "borrowIndex()")

    def total_reserves(self, vtoken: str) -> int:
        return self._call_uint(vtoken, "totalReserves()")

    def total_borrows(self, vtoken: str) -> int:
        return self._call_uint(vtoken, "totalBorrows()")

    def get_cash(self, vtoken: str) -> int:
        return self._call_uint(vtoken, "getCash()")

    def borrow_rate_per_block(self, vtoken: str) -> int:
        return self._call_uint(vtoken, "borrowRatePerBlock()")

    def supply_rate_per_block(self, vtoken: str) -> int:
        return self._call_uint(vtoken, "supplyRatePerBlock()")

    # ERC-20
    def name(self, token: str) -> str:
        return str(self._call_one(token, "name()", "string"))

    def symbol(self, token: str) -> str:
        return str(self._call_one(token, "symbol()", "string"))

    def decimals(self, token: str) -> int:
        return int(self._call_one(token, "decimals()", "uint8"))

    # Comptroller
    def oracle(self, comptroller: str) -> ChecksumAddress:
        return self._call_address(comptroller, "oracle()")

    def close_factor_mantissa(self, comptroller: str) -> int:
        return self._call_uint(comptroller, "closeFactorMantissa()")

    def liquidation_incentive_mantissa(self, comptroller: str) -> int:
        return self._call_uint(comptroller, "liquidationIncentiveMantissa()")

    def min_liquidatable_collateral(self, comptroller: str) -> int:
        return self._call_uint(comptroller, "minLiquidatableCollateral()")

    # Price oracle
    def get_underlying_price(self, oracle: str, vtoken: str) -> int:
        return int(
            self._call_one(
                oracle,
                "getUnderlyingPrice(address)",
                "uint256",
                arguments=[vtoken],
            )
        )


class Web3ChainReader(ChainReader):
    """
    Performs contract calls with `eth_call` against a fixed block.
    """

    def __init__(self, w3: Web3, block_identifier: BlockIdentifier | None = None) -> None:
        self.w3 = w3
        self.block_identifier = block_identifier

    def call(
        self,
        address: str,
        function_prototype: str,
        arguments: Sequence[Any] = (),
        return_types: Sequence[str] = (),
    ) -> tuple[Any, ...]:
        if len(arguments) != len(
            extract_argument_types_from_function_prototype(function_prototype)
        ):
            msg = f"Argument count does not match prototype {function_prototype}"
            raise ValueError(msg)

        logger.debug(f"Calling {function_prototype} on {address} at block {self.block_identifier}")
        return raw_call(
            w3=self.w3,
            address=get_checksum_address(address),
            calldata=encode_function_calldata(
                function_prototype=function_prototype,
                function_arguments=arguments,
            ),
            return_types=list(return_types),
            block_identifier=self.block_identifier,
        )
