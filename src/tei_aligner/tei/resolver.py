"""Resolution of token-identifier ranges to source text."""

from __future__ import annotations

import re

from lxml import etree

from tei_aligner.config import TEIConfig
from tei_aligner.tei.xml import get_attribute, iter_elements, parse_xml, text_content
from tei_aligner.types import Token

_NUMERIC_SUFFIX = re.compile(r"([0-9]+)\Z")


def numeric_suffix(identifier: str) -> int | None:
    """Trailing decimal digits of an identifier (`"w123"` -> 123), else None."""
    match = _NUMERIC_SUFFIX.search(identifier)
    if match is None:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # Longer than the interpreter's int conversion limit.
        return None


def collect_tokens(root: etree._Element, config: TEIConfig | None = None) -> list[Token]:
    """Flatten every identified token of the tree in document order.

    Tokens nested in sentences, paragraphs or other tokens are all found. A
    token's text is its full text content, so correction mark-up inside a word
    is flattened into it.
    """

    config = config or TEIConfig()
    tokens: list[Token] = []
    for element in iter_elements(root, config.token_tag, ignore_case=True):
        token_id = get_attribute(element, config.id_attribute)
        if not token_id:
            continue
        tokens.append(Token(id=token_id, text=text_content(element).strip()))
    return tokens


class SourceIndex:
    """A source document parsed once and queried for many ranges.

    Only tokens with a numeric suffix are kept; the rest can never fall inside
    a range.
    """

    def __init__(self, tokens: list[Token]) -> None:
        self._entries: list[tuple[int, Token]] = []
        for token in tokens:
            number = numeric_suffix(token.id)
            if number is not None:
                self._entries.append((number, token))

    @classmethod
    def from_xml(cls, xml: str | bytes, config: TEIConfig | None = None) -> "SourceIndex":
        return cls(collect_tokens(parse_xml(xml), config))

    def __len__(self) -> int:
        return len(self._entries)

    def tokens_in_range(self, start_id: str, end_id: str) -> list[Token]:
        """Tokens whose suffix lies in the inclusive range, ascending by suffix.

        The sort is stable, so tokens sharing an identifier keep document
        order. A reversed range or an identifier without a numeric suffix
        selects nothing.
        """

        start = numeric_suffix(start_id)
        end = numeric_suffix(end_id)
        if start is None or end is None:
            return []
        selected = [entry for entry in self._entries if start <= entry[0] <= end]
        selected.sort(key=lambda entry: entry[0])
        return [token for _, token in selected]

    def resolve(self, start_id: str, end_id: str) -> str:
        return " ".join(token.text for token in self.tokens_in_range(start_id, end_id))


def resolve_span(
    xml: str | bytes, start_id: str, end_id: str, config: TEIConfig | None = None
) -> str:
    """Space-joined text of the source tokens between two identifiers.

    Returns "" when no token matches or either identifier lacks a numeric
    suffix. Raises `TEIParseError` for a malformed document instead of
    degrading to an empty span.
    """

    return SourceIndex.from_xml(xml, config).resolve(start_id, end_id)
