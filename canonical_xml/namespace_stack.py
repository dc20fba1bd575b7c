from typing import List, Optional

from canonical_xml.errors import NamespaceStackUnderflow
from canonical_xml.types import Namespace


class NamespaceStack:
    """Namespaces of the currently open elements, innermost last."""

    def __init__(self) -> None:
        self._entries: List[Namespace] = []

    def push(self, namespace: Namespace) -> None:
        self._entries.append(namespace)

    def pop(self) -> Namespace:
        if not self._entries:
            raise NamespaceStackUnderflow("End element without a matching start")
        return self._entries.pop()

    def top(self) -> Optional[Namespace]:
        if not self._entries:
            return None
        return self._entries[-1]

    def __len__(self) -> int:
        return len(self._entries)
