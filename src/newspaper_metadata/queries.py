# File: queries.py

"""
SPARQL queries against the resource index.

Each builder returns a complete query string. Access-control clauses come
from an AccessControlProvider and are spliced in after the core pattern:
all OPTIONAL sub-patterns are joined into a single ``OPTIONAL {{a} UNION {b}}``
block and every filter becomes its own ``FILTER(...)``.
"""

from typing import List, Optional, Sequence

from .access_control import AccessControlProvider
from .exceptions import InvalidIdentifierError
from .namespaces import (
    ISLANDORA_RELS_EXT_URI, FEDORA_RELS_EXT_URI, FEDORA_MODEL_URI,
    ISSUE_CMODEL, PAGE_CMODEL, pid_to_uri,
)

PREFIXES = [
    f"PREFIX islandora-rels-ext: <{ISLANDORA_RELS_EXT_URI}>",
    f"PREFIX fedora-rels-ext: <{FEDORA_RELS_EXT_URI}>",
    f"PREFIX fedora-model: <{FEDORA_MODEL_URI}>",
]

# Characters a SPARQL IRIREF may not contain
IRI_FORBIDDEN = set('<>"{}|^`\\')


def object_iri(pid: str) -> str:
    """
    Render an object identifier as a bracketed IRI for use in a query.

    Raises:
        InvalidIdentifierError: If the identifier holds characters an IRI
            cannot contain
    """
    uri = pid_to_uri(pid)
    bad = sorted({c for c in uri if c in IRI_FORBIDDEN or ord(c) <= 0x20})
    if bad:
        raise InvalidIdentifierError(pid, f"not allowed in an IRI: {bad!r}")
    return f"<{uri}>"


def format_optionals(optionals: Sequence[str]) -> str:
    """Join OPTIONAL sub-patterns into one UNION block."""
    optionals = [clause.strip() for clause in optionals if clause and clause.strip()]
    if not optionals:
        return ''
    return 'OPTIONAL {{' + '} UNION {'.join(optionals) + '}}'


def format_filters(filters: Sequence[str]) -> str:
    """Wrap each filter expression in FILTER()."""
    return ' '.join(f"FILTER({expression.strip()})"
                    for expression in filters if expression and expression.strip())


def _access_clauses(access_control: Optional[AccessControlProvider], mode: str = 'view') -> List[str]:
    access_control = access_control or AccessControlProvider()
    clauses = [
        format_optionals(access_control.get_query_optionals(mode)),
        format_filters(access_control.get_query_filters()),
    ]
    return [f"  {clause}" for clause in clauses if clause]


def build_issues_query(newspaper_id: Optional[str] = None,
                       access_control: Optional[AccessControlProvider] = None,
                       missing_dates_only: bool = False) -> str:
    """
    Build the query listing newspaper issues.

    Args:
        newspaper_id: Restrict to issues that are members of this newspaper;
            None lists issues across the whole repository
        access_control: Provider of access-control clauses, queried once
        missing_dates_only: Only return issues without a dateIssued relationship

    Returns:
        SPARQL query projecting ?object ?label ?sequence ?issued, ordered by sequence
    """
    lines = PREFIXES + [
        "SELECT DISTINCT ?object ?label ?sequence ?issued",
        "FROM <#ri>",
        "WHERE {",
    ]
    if newspaper_id is not None:
        lines.append(f"  ?object fedora-rels-ext:isMemberOf {object_iri(newspaper_id)} .")
    lines += [
        f"  ?object fedora-model:hasModel <{pid_to_uri(ISSUE_CMODEL)}> ;",
        "          fedora-model:label ?label ;",
        "          islandora-rels-ext:isSequenceNumber ?sequence .",
        "  OPTIONAL { ?object islandora-rels-ext:dateIssued ?issued }",
    ]
    if missing_dates_only:
        lines.append("  FILTER(!bound(?issued))")
    lines += _access_clauses(access_control)
    lines += [
        "}",
        "ORDER BY ?sequence",
    ]
    return '\n'.join(lines)


def build_pages_query(issue_id: str,
                      access_control: Optional[AccessControlProvider] = None) -> str:
    """
    Build the query listing the pages of an issue.

    Returns:
        SPARQL query projecting ?object ?label ?sequence ?page, ordered by sequence
    """
    lines = PREFIXES + [
        "SELECT DISTINCT ?object ?label ?sequence ?page",
        "FROM <#ri>",
        "WHERE {",
        f"  ?object islandora-rels-ext:isPageOf {object_iri(issue_id)} ;",
        f"          fedora-model:hasModel <{pid_to_uri(PAGE_CMODEL)}> ;",
        "          fedora-model:label ?label ;",
        "          islandora-rels-ext:isSequenceNumber ?sequence .",
        "  OPTIONAL { ?object islandora-rels-ext:isPageNumber ?page }",
    ]
    lines += _access_clauses(access_control)
    lines += [
        "}",
        "ORDER BY ?sequence",
    ]
    return '\n'.join(lines)
