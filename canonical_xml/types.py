from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, NamedTuple, Protocol, Tuple, Union


class QName(NamedTuple):
    space: str
    local: str


class Attribute(NamedTuple):
    name: QName
    value: str


@dataclass(frozen=True)
class Declared:
    """A namespace URI bound as the default namespace with ``xmlns="uri"``."""

    uri: str

    def qualify(self, local: str) -> str:
        return local


@dataclass(frozen=True)
class LiteralPrefix:
    """A namespace string used verbatim as the element's prefix."""

    text: str

    def qualify(self, local: str) -> str:
        if not self.text:
            return local
        return f"{self.text}:{local}"


Namespace = Union[Declared, LiteralPrefix]


def namespace_for(space: str) -> Namespace:
    # only http(s)-style URIs are rendered through a default declaration
    if space.startswith("http"):
        return Declared(space)
    return LiteralPrefix(space)


class StartElement(NamedTuple):
    namespace: Namespace
    local: str
    attributes: Tuple[Attribute, ...] = ()

    @classmethod
    def of(
        cls, space: str, local: str, attributes: Iterable[Attribute] = ()
    ) -> StartElement:
        return cls(namespace_for(space), local, tuple(attributes))


class EndElement(NamedTuple):
    namespace: Namespace
    local: str

    @classmethod
    def of(cls, space: str, local: str) -> EndElement:
        return cls(namespace_for(space), local)


class CharData(NamedTuple):
    data: bytes


Token = Union[StartElement, EndElement, CharData]


class CanonicalResult(NamedTuple):
    data: bytes
    id: str


class Options(NamedTuple):
    lenient_stream: bool = False
    strict_prefixes: bool = True
    chunk_size: int = 65536


class Logger(Protocol):
    def log(self, *message: str) -> None:
        ...


class Tokenizer(Protocol):
    def iter_tokens(self, markup: bytes, chunk_size: int = ...) -> Iterator[Token]:
        ...
