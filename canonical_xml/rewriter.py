"""Rewrite a start/end/character-data token stream as canonical XML.

Namespace declarations are written once per scope: an element repeats the
default ``xmlns`` declaration only when its namespace differs from its
parent's.  Attributes are sorted with :func:`canonical_attribute_key`, and the
identifier used for signature references is read from the root element.
"""

import io
from typing import Dict, Iterable, Optional

from canonical_xml.attribute_order import XMLNS, sort_attributes
from canonical_xml.errors import (
    TokenStreamError,
    UnbalancedNestingError,
    UnresolvedPrefixError,
)
from canonical_xml.namespace_stack import NamespaceStack
from canonical_xml.types import (
    Attribute,
    CanonicalResult,
    CharData,
    Declared,
    EndElement,
    Logger,
    Options,
    StartElement,
    Token,
)


def is_identifier_name(local: str) -> bool:
    # "ID" and anything ending in "Id", including "Id" itself
    return local == "ID" or local.endswith("Id")


def find_identifier(attributes: Iterable[Attribute]) -> str:
    found = ""
    for attribute in attributes:
        if is_identifier_name(attribute.name.local):
            found = attribute.value
    return found


class TokenRewriter:
    def __init__(self, options: Options = Options(), logger: Optional[Logger] = None):
        self.options = options
        self.logger = logger
        self.namespaces = NamespaceStack()
        self.out = io.BytesIO()
        self.id = ""
        self.seen_root = False

    def rewrite(self, tokens: Iterable[Token]) -> CanonicalResult:
        iterator = iter(tokens)
        while True:
            try:
                token = next(iterator)
            except StopIteration:
                break
            except TokenStreamError as e:
                if not self.options.lenient_stream:
                    raise
                self._log(f"Token stream ended early, keeping output so far: {e}")
                return self.result()
            self.write_token(token)

        if self.namespaces and not self.options.lenient_stream:
            raise UnbalancedNestingError(
                f"{len(self.namespaces)} element(s) still open at end of stream"
            )
        return self.result()

    def result(self) -> CanonicalResult:
        return CanonicalResult(self.out.getvalue(), self.id)

    def write_token(self, token: Token) -> None:
        if isinstance(token, StartElement):
            if not self.seen_root:
                self.seen_root = True
                self.id = find_identifier(token.attributes)
            self.write_start(token)
        elif isinstance(token, EndElement):
            self.namespaces.pop()
            self._write(f"</{token.namespace.qualify(token.local)}>")
        elif isinstance(token, CharData):
            self.out.write(token.data)

    def write_start(self, start: StartElement) -> None:
        self._write(f"<{start.namespace.qualify(start.local)}")
        attributes = sort_attributes(start.attributes)
        self.write_namespace(start)

        prefixes: Dict[str, str] = {}
        for attribute in attributes:
            name = attribute.name
            if name.local == XMLNS:
                continue
            if name.space == XMLNS:
                self._write(f' xmlns:{name.local}="{attribute.value}"')
                prefixes[attribute.value] = name.local
            elif not name.space:
                self._write(f' {name.local}="{attribute.value}"')
            else:
                prefix = self.prefix_for(prefixes, name.space, name.local)
                self._write(f' {prefix}:{name.local}="{attribute.value}"')
        self._write(">")

    def write_namespace(self, start: StartElement) -> None:
        namespace = start.namespace
        current = self.namespaces.top()
        if isinstance(namespace, Declared) and (current is None or current != namespace):
            self._write(f' xmlns="{namespace.uri}"')
        self.namespaces.push(namespace)

    def prefix_for(self, prefixes: Dict[str, str], uri: str, local: str) -> str:
        prefix = prefixes.get(uri)
        if prefix is not None:
            return prefix
        if self.options.strict_prefixes:
            raise UnresolvedPrefixError(uri, local)
        self._log(f"Warning: attribute {local!r} in {uri!r} has no local prefix")
        return ""

    def _write(self, text: str) -> None:
        self.out.write(text.encode("utf-8"))

    def _log(self, message: str) -> None:
        if self.logger is not None:
            self.logger.log(message)


def canonicalize_tokens(
    tokens: Iterable[Token],
    options: Options = Options(),
    logger: Optional[Logger] = None,
) -> CanonicalResult:
    return TokenRewriter(options, logger).rewrite(tokens)
