"""Doubled types shared across the test suite."""

from __future__ import annotations

import types
from abc import ABC, abstractmethod
from collections.abc import Generator, Iterator, Mapping, Sequence
from enum import Enum
from typing import Any, Protocol, Self, final


class Status(Enum):
    ACTIVE = "active"
    RETIRED = "retired"


class Empty(Enum):
    pass


class Repository(Protocol):
    def fetch(self, key: int) -> str: ...

    def save(self, key: int, value: str) -> None: ...

    def count(self) -> int: ...


class Echo(Protocol):
    def echo(self, value: str, suffix: str = "") -> str: ...


class Reader(Protocol):
    def read(self, path: str) -> bytes: ...


class Writer(Protocol):
    def write(self, path: str, data: bytes) -> int: ...


class TextReader(Protocol):
    def read(self, path: str, encoding: str) -> str: ...


class QueryBuilder(Protocol):
    def where(self, clause: str) -> QueryBuilder: ...

    def limit(self, n: int) -> Self: ...

    def build(self) -> str: ...


class Transaction:
    def commit(self) -> bool:
        return True


class Session:
    def transaction(self) -> Transaction:
        return Transaction()


class Connection:
    def session(self) -> Session:
        return Session()


class Node:
    def next(self) -> Node:
        return self


class Defaults:
    """One operation per auto-value category."""

    def integer(self) -> int:
        raise NotImplementedError

    def ratio(self) -> float:
        raise NotImplementedError

    def flag(self) -> bool:
        raise NotImplementedError

    def label(self) -> str:
        raise NotImplementedError

    def payload(self) -> bytes:
        raise NotImplementedError

    def items(self) -> list[str]:
        raise NotImplementedError

    def pair(self) -> tuple[int, int]:
        raise NotImplementedError

    def index(self) -> dict[str, int]:
        raise NotImplementedError

    def tags(self) -> set[str]:
        raise NotImplementedError

    def frozen(self) -> frozenset[str]:
        raise NotImplementedError

    def stream(self) -> Iterator[int]:
        raise NotImplementedError

    def generator(self) -> Generator[int, None, None]:
        raise NotImplementedError

    def sequence(self) -> Sequence[int]:
        raise NotImplementedError

    def mapping(self) -> Mapping[str, int]:
        raise NotImplementedError

    def maybe(self) -> int | None:
        raise NotImplementedError

    def status(self) -> Status:
        raise NotImplementedError

    def nothing(self) -> None:
        raise NotImplementedError

    def untyped(self):  # type: ignore[no-untyped-def]
        raise NotImplementedError

    def anything(self) -> Any:
        raise NotImplementedError

    def ambiguous(self) -> int | str:
        raise NotImplementedError

    def chained(self) -> Self:
        raise NotImplementedError

    def connection(self) -> Connection:
        raise NotImplementedError

    def function(self) -> types.FunctionType:
        raise NotImplementedError

    def empty(self) -> Empty:
        raise NotImplementedError

    def span(self) -> range:
        raise NotImplementedError


class Calculator:
    def __init__(self, offset: int = 0) -> None:
        self.offset = offset
        self.constructed = True

    def add(self, a: int, b: int) -> int:
        return a + b + self.offset

    def double(self, value: int) -> int:
        return self.add(value, value)

    def reveal(self) -> str:
        return self._secret()

    def _secret(self) -> str:
        return "secret"

    @final
    def version(self) -> str:
        return "1.0"

    @staticmethod
    def create() -> Calculator:
        return Calculator()

    @classmethod
    def default(cls) -> Calculator:
        return cls()


class Shape(ABC):
    @abstractmethod
    def area(self) -> float: ...

    def summary(self) -> str:
        return f"shape with area {self.area()}"


class Document:
    def __init__(self, title: str) -> None:
        self.title = title
        self.copies = 0

    def __copy__(self) -> Document:
        clone = type(self).__new__(type(self))
        clone.__dict__.update(self.__dict__)
        clone.copies = self.copies + 1
        return clone

    def heading(self) -> str:
        return self.title.upper()


class SlotA:
    __slots__ = ("a",)

    def first(self) -> int:
        return 1


class SlotB:
    __slots__ = ("b",)

    def second(self) -> int:
        return 2


class Positional:
    def only(self, a: int, /) -> int:
        return a

    def mixed(self, a: int, /, **options: object) -> int:
        return a
