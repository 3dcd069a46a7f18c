from __future__ import annotations

from collections.abc import Iterable
from typing import (
    overload,
    Any,
    Protocol,
    TypeAlias,
    TypeVar
)
from typing_extensions import Self

# The exact type of a Row depends on the row_factory used and so, it is given
# the generic type Any.  A Page is the list of rows returned by one paged read.
Row: TypeAlias = Any
Chunk: TypeAlias = list[Row]
Page: TypeAlias = list[Row]


class Cursor(Protocol):
    rowcount: int
    description: Any
    def execute(self, *args: Any, **kwargs: Any) -> Any: ...
    def executemany(self, *args: Any, **kwargs: Any) -> Any: ...
    def fetchmany(self, *args: Any, **kwarg) -> Iterable[Row]: ...
    def fetchall(self) -> Iterable[Row]: ...
    def close(self) -> None: ...


# Define a type variable that represents any Cursor.
# `bound` forces it to Cursor's interface.  Covariant means it is only used
# as a return value.
C = TypeVar('C', bound=Cursor, covariant=True)


class Connection(Protocol[C]):
    def close(self) -> None: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...

    # Overload cursor specifications as different DBAPI drivers have different
    # signatures.
    @overload
    def cursor(self) -> C: ...
    @overload
    def cursor(self, factory: Any) -> C: ...
    def cursor(self, *args: Any, **kwargs: Any) -> C: ...

    def __enter__(self) -> Self: ...
    def __exit__(self, *args: Any, **kwargs: Any) -> bool | None: ...

