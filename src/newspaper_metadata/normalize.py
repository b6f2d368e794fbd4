# File: normalize.py

"""
Conversion of raw backend rows into uniform issue and page records.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Union

from .config import MetadataConfig, get_config
from .date_utils import parse_datetime
from .search_index import field

logger = logging.getLogger(__name__)

TRIPLESTORE = 'triplestore'
SEARCH_INDEX = 'search_index'


@dataclass
class IssueRecord:
    """One newspaper issue as returned by a listing query."""
    identifier: str
    label: str
    sequence: Union[str, int]
    issued: datetime


@dataclass
class PageRecord:
    """One page of an issue."""
    identifier: str
    label: str
    sequence: Union[str, int]
    page: Optional[str] = None


def _binding(row: Dict[str, Any], name: str) -> Optional[str]:
    binding = row.get(name)
    if not binding:
        return None
    return binding.get('value')


def parse_issued(value: Any, identifier: str) -> datetime:
    """
    Parse an issue date, substituting the current time when it is missing or
    unparseable. The substitution is logged against the issue identifier.
    """
    issued = parse_datetime(value) if isinstance(value, str) else None
    if issued is None:
        logger.warning(f"Failed to get issued date for {identifier} (got {value!r}), using current time",
                       extra={'issue_id': identifier})
        return datetime.now()
    return issued


def normalize_triplestore_row(row: Dict[str, Any]) -> IssueRecord:
    """Build an IssueRecord from a resource index result row."""
    identifier = _binding(row, 'object')
    return IssueRecord(
        identifier=identifier,
        label=_binding(row, 'label') or '',
        sequence=_binding(row, 'sequence'),
        issued=parse_issued(_binding(row, 'issued'), identifier),
    )


def normalize_search_row(row: Dict[str, Any], config: Optional[MetadataConfig] = None) -> IssueRecord:
    """Build an IssueRecord from a search index result object."""
    config = config or get_config()
    identifier = field(row, config.solr_identifier_field)
    return IssueRecord(
        identifier=identifier,
        label=field(row, config.solr_label_field, ''),
        sequence=field(row, config.solr_sequence_field, 0),
        issued=parse_issued(field(row, config.solr_date_field), identifier),
    )


def normalize(row: Dict[str, Any], backend_kind: str,
              config: Optional[MetadataConfig] = None) -> IssueRecord:
    """
    Build an IssueRecord from a row produced by either backend.

    Args:
        row: Raw result row
        backend_kind: TRIPLESTORE or SEARCH_INDEX
        config: Configuration naming the search index fields

    Returns:
        Normalized issue record
    """
    if backend_kind == TRIPLESTORE:
        return normalize_triplestore_row(row)
    if backend_kind == SEARCH_INDEX:
        return normalize_search_row(row, config)
    raise ValueError(f"Unknown backend kind: {backend_kind}")


def normalize_page_row(row: Dict[str, Any]) -> PageRecord:
    """Build a PageRecord from a resource index result row."""
    return PageRecord(
        identifier=_binding(row, 'object'),
        label=_binding(row, 'label') or '',
        sequence=_binding(row, 'sequence'),
        page=_binding(row, 'page'),
    )
