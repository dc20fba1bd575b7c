class CanonicalizationError(Exception):
    pass


class MarshalError(CanonicalizationError):
    pass


class TokenStreamError(CanonicalizationError):
    pass


class UnbalancedNestingError(CanonicalizationError):
    pass


class NamespaceStackUnderflow(UnbalancedNestingError):
    pass


class UnresolvedPrefixError(CanonicalizationError):
    def __init__(self, uri: str, local: str) -> None:
        super().__init__(
            f"No xmlns prefix declared on the element for attribute {local!r} "
            f"in namespace {uri!r}"
        )
        self.uri = uri
        self.local = local


class ConfigError(CanonicalizationError):
    pass
