from typing import Iterable, List, Tuple

from canonical_xml.types import Attribute

XMLNS = "xmlns"


def canonical_attribute_key(attribute: Attribute) -> Tuple[int, str, str]:
    """Sort key for attributes on one start tag.

    The default namespace declaration comes first, then prefixed namespace
    declarations by prefix, then ordinary attributes by namespace URI and
    local name.
    """
    name = attribute.name
    if name.local == XMLNS:
        return (0, "", "")
    if name.space == XMLNS:
        return (1, "", name.local)
    return (2, name.space, name.local)


def sort_attributes(attributes: Iterable[Attribute]) -> List[Attribute]:
    return sorted(attributes, key=canonical_attribute_key)
