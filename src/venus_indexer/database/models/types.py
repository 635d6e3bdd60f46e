from typing import Annotated

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import mapped_column

PrimaryKeyInt = Annotated[
    int,
    mapped_column(primary_key=True, autoincrement=True),
]
PrimaryKeyEntityId = Annotated[
    str,
    mapped_column(String(200), primary_key=True),
]
ForeignKeyPoolId = Annotated[
    str,
    mapped_column(ForeignKey("pools.id"), index=True),
]
ForeignKeyMarketId = Annotated[
    str,
    mapped_column(ForeignKey("markets.id"), index=True),
]
ForeignKeyAccountId = Annotated[
    str,
    mapped_column(ForeignKey("accounts.id"), index=True),
]
ForeignKeyAccountVTokenId = Annotated[
    str,
    mapped_column(ForeignKey("account_vtokens.id"), index=True),
]
ForeignKeyRewardsDistributorId = Annotated[
    str,
    mapped_column(ForeignKey("rewards_distributors.id"), index=True),
]
TransactionHash = Annotated[
    str,
    mapped_column(String(66)),
]
