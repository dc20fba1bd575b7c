"""Canonical XML for signing.

Marshals a value, re-reads it as a token stream and rewrites it so that
namespace declarations are not repeated for each element and attributes are
sorted.
"""

from typing import Any, Optional

from canonical_xml.marshal import marshal
from canonical_xml.profile_logger import ProfileLogger
from canonical_xml.rewriter import canonicalize_tokens
from canonical_xml.tokenize_xml import XMLTokenizer
from canonical_xml.types import CanonicalResult, Logger, Options, Tokenizer


def canonicalize(
    value: Any,
    options: Options = Options(),
    logger: Optional[Logger] = None,
    prof_logger: Optional[ProfileLogger] = None,
    tokenizer: Optional[Tokenizer] = None,
) -> CanonicalResult:
    """Return the canonical bytes of ``value`` and the root element's identifier.

    A marshalling failure is raised before anything is tokenized.
    """
    prof_logger = prof_logger or ProfileLogger()
    tokenizer = tokenizer or XMLTokenizer()

    with prof_logger.log_time("marshal"):
        markup = marshal(value)
    tokens = tokenizer.iter_tokens(markup, options.chunk_size)
    with prof_logger.log_time("rewrite"):
        return canonicalize_tokens(tokens, options, logger)

