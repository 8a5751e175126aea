from __future__ import annotations

from typing import ContextManager, Protocol


class TransactionManager(Protocol):
    """Opens one atomic unit of work.

    Repository calls made inside `transaction()` commit together, or are all
    rolled back when the block raises. `DatabaseConnection` implements it.
    """

    def transaction(self) -> ContextManager[None]:
        raise NotImplementedError
