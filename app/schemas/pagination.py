from typing import List, Optional, Sequence, TypeVar
from fastapi import Query

T = TypeVar("T")


class PaginationParams:
    """Inject as Depends(PaginationParams) into endpoints. No limit means everything after offset."""
    def __init__(
        self,
        offset: int = Query(0, ge=0, description="Number of entries to skip"),
        limit: Optional[int] = Query(None, ge=1, le=100000, description="Max entries to return"),
    ):
        self.offset = offset
        self.limit = limit

    def apply(self, items: Sequence[T]) -> List[T]:
        end = None if self.limit is None else self.offset + self.limit
        return list(items[self.offset:end])
