from typing import Any

from lxml import etree

from canonical_xml.errors import MarshalError


def marshal(value: Any) -> bytes:
    """Serialize ``value`` to (non-canonical) XML markup.

    Accepts markup as bytes or str, an lxml element or tree, or an object
    with a ``to_element()`` method returning an lxml element.
    """
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (etree._Element, etree._ElementTree)):
        return etree.tostring(value, encoding="utf-8")

    to_element = getattr(value, "to_element", None)
    if to_element is None:
        raise MarshalError(f"Cannot marshal {type(value).__name__} to XML")
    try:
        element = to_element()
    except Exception as e:
        raise MarshalError(f"{type(value).__name__}.to_element() failed: {e}") from e
    if not isinstance(element, etree._Element):
        raise MarshalError(
            f"{type(value).__name__}.to_element() returned "
            f"{type(element).__name__}, not an element"
        )
    return etree.tostring(element, encoding="utf-8")
