"""
Entrez query construction.

Serializes structured search terms into the Entrez bracket-tag query
grammar and flattens request parameters into a query string.
"""

from collections.abc import Mapping as MappingABC
from typing import Any, List, Mapping, Tuple, Union
from urllib.parse import quote

from .config import DEFAULT_OPERATOR, OPERATORS
from .exceptions import UnknownOperator

SearchTerms = Union[str, Mapping[str, Any]]

# Characters of the Entrez term grammar that reach the server unescaped
QUERY_SAFE_CHARS = "[](),:\"*"

# The search term is already URL-shaped: a bare "+" is the E-utilities word
# separator and "%" starts an escape made by convert_search_term_hash.
TERM_PARAM = "term"
TERM_SAFE_CHARS = QUERY_SAFE_CHARS + "+%"


def _join_values(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return ",".join(sorted(str(v) for v in value))
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _escape_term_value(text: str) -> str:
    """Percent-escape the characters a term value shares with the URL grammar."""
    return text.replace("%", "%25").replace("+", "%2B")


def convert_search_term_hash(
    terms: Mapping[str, Any],
    operator: str = DEFAULT_OPERATOR,
) -> str:
    """
    Convert a mapping of field tags to values into an Entrez search term.

    Entries are rendered as ``value[FIELD]`` in mapping order and joined with
    ``+AND+`` or ``+OR+``. An OR expression is wrapped in parentheses. List
    values are comma-joined before the field tag is applied. A "+" or "%"
    inside a value is percent-escaped so only the separators stay bare.

    Example:
        >>> convert_search_term_hash({"WORD": "low coverage", "SEQS": "inprogress"})
        'low coverage[WORD]+AND+inprogress[SEQS]'
        >>> convert_search_term_hash({"A": "x", "B": "y"}, "OR")
        '(x[A]+OR+y[B])'

    Raises:
        UnknownOperator: If operator is not AND or OR
    """
    if operator not in OPERATORS:
        raise UnknownOperator(operator)

    term = f"+{operator}+".join(
        f"{_escape_term_value(_join_values(value))}[{field}]" for field, value in terms.items()
    )
    if operator == "OR":
        term = f"({term})"
    return term


def build_search_term(terms: SearchTerms, operator: str = DEFAULT_OPERATOR) -> str:
    """
    Pass a literal term through verbatim; serialize a mapping of field terms.

    A literal term follows E-utilities URL conventions: a bare "+" is a space.
    """
    if isinstance(terms, str):
        return terms
    return convert_search_term_hash(terms, operator)


def normalize_params(params: Mapping[str, Any]) -> List[Tuple[str, str]]:
    """
    Flatten request parameters into ordered key/value string pairs.

    - ``None`` values are dropped
    - lists and tuples are comma-joined in order, sets in sorted order
    - booleans become ``true``/``false``
    - nested mappings are rejected

    Raises:
        TypeError: If a parameter value is a mapping
    """
    pairs: List[Tuple[str, str]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, MappingABC):
            raise TypeError(f"Parameter {key!r} cannot be a mapping")
        pairs.append((str(key), _join_values(value)))
    return pairs


def encode_query(params: Mapping[str, Any]) -> str:
    """
    Encode parameters as a query string.

    Every value is percent-encoded except for the Entrez grammar characters.
    The ``term`` value additionally keeps its bare ``+`` separators and the
    ``%`` escapes produced by convert_search_term_hash.
    """
    parts = []
    for key, value in normalize_params(params):
        safe = TERM_SAFE_CHARS if key == TERM_PARAM else QUERY_SAFE_CHARS
        parts.append(f"{quote(key, safe='')}={quote(value, safe=safe)}")
    return "&".join(parts)
