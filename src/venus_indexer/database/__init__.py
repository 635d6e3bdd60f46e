from venus_indexer.database.models import Base

__all__ = ("Base",)
