from sqlalchemy.orm import Mapped

from .base import Base
from .types import PrimaryKeyInt


class IndexedNetworkTable(Base):
    __tablename__ = "indexed_networks"

    id: Mapped[PrimaryKeyInt]
    name: Mapped[str]
    chain_id: Mapped[int]
    active: Mapped[bool]
    last_update_block: Mapped[int | None]
