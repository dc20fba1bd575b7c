import xml.sax
from typing import Dict, Iterator, List, Tuple, Union
from xml.sax import SAXParseException

from canonical_xml.errors import TokenStreamError
from canonical_xml.types import (
    Attribute,
    CharData,
    EndElement,
    QName,
    StartElement,
    Token,
)

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


def split_name(name: str) -> Tuple[str, str]:
    if ":" in name:
        prefix, local = name.split(":", 1)
        return prefix, local
    return "", name


class TokenizingSaxHandler(xml.sax.ContentHandler):
    """Collects element and character tokens from raw (non-namespace) SAX events.

    Prefixes are resolved against the declarations in scope. A prefix with no
    declaration is kept as the namespace string itself, so it is later
    rendered as a literal prefix.
    """

    def __init__(self) -> None:
        super().__init__()
        self.tokens: List[Token] = []
        self.chars: List[str] = []
        self.scopes: List[Dict[str, str]] = [{"xml": XML_NAMESPACE}]

    def startElement(self, name, attrs):
        self.flush_chars()
        bindings = dict(self.scopes[-1])
        for attr_name, attr_value in attrs.items():
            if attr_name == "xmlns":
                bindings[""] = attr_value
            elif attr_name.startswith("xmlns:"):
                bindings[attr_name[len("xmlns:"):]] = attr_value
        self.scopes.append(bindings)

        attributes = [
            Attribute(self.attribute_name(attr_name, bindings), attr_value)
            for attr_name, attr_value in attrs.items()
        ]
        space, local = self.element_name(name, bindings)
        self.tokens.append(StartElement.of(space, local, attributes))

    def endElement(self, name):
        self.flush_chars()
        space, local = self.element_name(name, self.scopes[-1])
        self.scopes.pop()
        self.tokens.append(EndElement.of(space, local))

    def characters(self, content):
        # Buffer characters so adjacent chunks become one token
        self.chars.append(content)

    def flush_chars(self):
        if self.chars:
            self.tokens.append(CharData("".join(self.chars).encode("utf-8")))
        self.chars = []

    def drain(self) -> List[Token]:
        tokens, self.tokens = self.tokens, []
        return tokens

    @staticmethod
    def element_name(name: str, bindings: Dict[str, str]) -> Tuple[str, str]:
        prefix, local = split_name(name)
        if not prefix:
            return bindings.get("", ""), local
        return bindings.get(prefix, prefix), local

    @staticmethod
    def attribute_name(name: str, bindings: Dict[str, str]) -> QName:
        if name == "xmlns":
            return QName("", "xmlns")
        prefix, local = split_name(name)
        if not prefix:
            return QName("", local)
        if prefix == "xmlns":
            return QName("xmlns", local)
        return QName(bindings.get(prefix, prefix), local)


class XMLTokenizer:
    def iter_tokens(
        self, markup: Union[str, bytes], chunk_size: int = 65536
    ) -> Iterator[Token]:
        if isinstance(markup, str):
            markup = markup.encode("utf-8")
        handler = TokenizingSaxHandler()
        parser = xml.sax.make_parser()
        parser.setContentHandler(handler)
        try:
            for offset in range(0, len(markup), chunk_size):
                parser.feed(markup[offset : offset + chunk_size])
                yield from handler.drain()
            parser.close()
        except SAXParseException as e:
            handler.flush_chars()
            yield from handler.drain()
            raise TokenStreamError(str(e)) from e
        yield from handler.drain()

    def tokenize(self, markup: Union[str, bytes]) -> List[Token]:
        return list(self.iter_tokens(markup))


if __name__ == "__main__":
    xml_string = """
    <note xmlns="http://example.com/note" xmlns:t="http://example.com/t" t:date="8/31/12" noteId="n1">
        <to>Tove</to>
        <ds:from>Jani</ds:from>
    </note>
    """

    for token in XMLTokenizer().tokenize(xml_string):
        print(token)
