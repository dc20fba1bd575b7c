"""Tests for tokenizing, marshalling and the canonicalize entry point."""

import pytest
from lxml import etree

from canonical_xml.canonical import canonicalize
from canonical_xml.errors import MarshalError, TokenStreamError
from canonical_xml.marshal import marshal
from canonical_xml.profile_logger import ProfileLogger
from canonical_xml.tokenize_xml import XML_NAMESPACE, XMLTokenizer
from canonical_xml.types import (
    CharData,
    Declared,
    EndElement,
    LiteralPrefix,
    Options,
    QName,
    StartElement,
)

DOCUMENT = (
    b'<root xmlns="http://example.com/r" xmlns:x="http://example.com/x" '
    b'x:b="2" a="1" docId="d1">'
    b'<item xmlns="http://example.com/r"><sub xmlns="http://example.com/s">text</sub></item>'
    b"</root>"
)

CANONICAL = (
    b'<root xmlns="http://example.com/r" xmlns:x="http://example.com/x" '
    b'a="1" docId="d1" x:b="2">'
    b'<item><sub xmlns="http://example.com/s">text</sub></item>'
    b"</root>"
)


class TestTokenizer:
    """Test XMLTokenizer."""

    def test_prefix_resolution(self):
        tokens = XMLTokenizer().tokenize(
            '<r xmlns="http://e/x" xmlns:p="http://e/p" p:a="1" b="2">'
            "<p:c/><ds:d/>t</r>"
        )
        start = tokens[0]
        assert isinstance(start, StartElement)
        assert start.namespace == Declared("http://e/x")
        assert start.local == "r"
        assert {a.name: a.value for a in start.attributes} == {
            QName("", "xmlns"): "http://e/x",
            QName("xmlns", "p"): "http://e/p",
            QName("http://e/p", "a"): "1",
            QName("", "b"): "2",
        }
        assert tokens[1:] == [
            StartElement(Declared("http://e/p"), "c"),
            EndElement(Declared("http://e/p"), "c"),
            StartElement(LiteralPrefix("ds"), "d"),
            EndElement(LiteralPrefix("ds"), "d"),
            CharData(b"t"),
            EndElement(Declared("http://e/x"), "r"),
        ]

    def test_declarations_are_scoped(self):
        tokens = XMLTokenizer().tokenize('<a><b xmlns="http://e/b"/><c/></a>')
        assert [t.namespace for t in tokens] == [
            LiteralPrefix(""),
            Declared("http://e/b"),
            Declared("http://e/b"),
            LiteralPrefix(""),
            LiteralPrefix(""),
            LiteralPrefix(""),
        ]

    def test_xml_prefix(self):
        (start, _) = XMLTokenizer().tokenize('<a xml:lang="en"/>')
        assert start.attributes[0].name == QName(XML_NAMESPACE, "lang")

    def test_entities_are_decoded(self):
        tokens = XMLTokenizer().tokenize("<a>A &amp; B</a>")
        assert tokens[1] == CharData(b"A & B")

    def test_small_chunks(self):
        tokenizer = XMLTokenizer()
        assert list(tokenizer.iter_tokens(DOCUMENT, chunk_size=3)) == tokenizer.tokenize(
            DOCUMENT
        )

    def test_malformed(self):
        with pytest.raises(TokenStreamError):
            XMLTokenizer().tokenize("<a><b></a>")


class TestMarshal:
    """Test marshal."""

    def test_bytes_and_str(self):
        assert marshal(b"<a/>") == b"<a/>"
        assert marshal("<a>é</a>") == "<a>é</a>".encode("utf-8")

    def test_unsupported(self):
        with pytest.raises(MarshalError):
            marshal(42)

    def test_to_element_failure(self):
        class Broken:
            def to_element(self):
                raise ValueError("no data")

        with pytest.raises(MarshalError, match="no data"):
            marshal(Broken())

    def test_to_element_wrong_type(self):
        class NotAnElement:
            def to_element(self):
                return "<a/>"

        with pytest.raises(MarshalError):
            marshal(NotAnElement())


class TestCanonicalize:
    """Test canonicalize."""

    def test_document(self):
        result = canonicalize(DOCUMENT)
        assert result.data == CANONICAL
        assert result.id == "d1"

    def test_idempotent(self):
        once = canonicalize(DOCUMENT)
        twice = canonicalize(once.data)
        assert twice == once

    def test_output_is_well_formed(self):
        root = etree.fromstring(canonicalize(DOCUMENT).data)
        assert root.tag == "{http://example.com/r}root"
        assert root[0][0].tag == "{http://example.com/s}sub"

    def test_char_data_passthrough(self):
        result = canonicalize(b"<a><b/>A &amp; B<c/></a>")
        assert result.data == b"<a><b></b>A & B<c></c></a>"

    def test_lxml_element(self):
        root = etree.Element("{http://example.com/r}root", nsmap={None: "http://example.com/r"})
        root.set("Id", "x1")
        etree.SubElement(root, "{http://example.com/r}child").text = "hi"
        result = canonicalize(root)
        assert result.data == b'<root xmlns="http://example.com/r" Id="x1"><child>hi</child></root>'
        assert result.id == "x1"

    def test_marshallable_object(self):
        class Assertion:
            def to_element(self):
                element = etree.Element("{http://example.com/saml}Assertion")
                element.set("AssertionId", "a-1")
                return element

        result = canonicalize(Assertion())
        assert result.id == "a-1"
        assert result.data.startswith(b'<Assertion xmlns="http://example.com/saml" ')

    def test_marshal_failure_propagates(self):
        with pytest.raises(MarshalError):
            canonicalize(object())

    def test_malformed_strict(self):
        with pytest.raises(TokenStreamError):
            canonicalize(b"<a><b></a>")

    def test_malformed_lenient(self):
        result = canonicalize(b"<a><b></a>", Options(lenient_stream=True))
        assert result.data == b"<a><b>"

    def test_text_before_fault_lenient(self):
        result = canonicalize(b"<a>text</b>", Options(lenient_stream=True))
        assert result.data == b"<a>text"

    def test_truncated_text_lenient(self):
        result = canonicalize(b"<a>partial", Options(lenient_stream=True))
        assert result.data == b"<a>partial"

    def test_profile_logger(self):
        prof_logger = ProfileLogger()
        canonicalize(DOCUMENT, prof_logger=prof_logger)
        assert [log.name for log in prof_logger.times] == ["marshal", "rewrite"]
        assert prof_logger.total("marshal") == prof_logger.times[0].time
        assert prof_logger.total("tokenize") == 0
