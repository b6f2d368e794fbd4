# File: relationships.py

"""
Single-valued relationship lookups on newspaper, issue and page objects.

Objects only need a ``relationships`` collection offering ``get``, ``add``
and ``remove``; see fedora.FedoraRelationships. When a relationship holds
several values, the first one the store returns wins.
"""

import logging
from datetime import date, datetime
from typing import Any, Optional, Union

from .date_utils import parse_datetime, format_issue_date
from .namespaces import (
    ISLANDORA_RELS_EXT_URI, FEDORA_RELS_EXT_URI,
    IS_PAGE_OF, IS_SEQUENCE_NUMBER, IS_MEMBER_OF, DATE_ISSUED,
)

logger = logging.getLogger(__name__)


def _first_value(obj: Any, namespace: str, predicate: str,
                 literal: Optional[bool] = None) -> Optional[str]:
    relationships = obj.relationships.get(namespace, predicate, literal=literal)
    if not relationships:
        return None
    return relationships[0].value


def get_parent_issue(obj: Any) -> Optional[str]:
    """Identifier of the issue a page belongs to, or None."""
    return _first_value(obj, ISLANDORA_RELS_EXT_URI, IS_PAGE_OF)


def get_sequence(obj: Any) -> Optional[str]:
    """Sequence number of an issue or page, or None."""
    return _first_value(obj, ISLANDORA_RELS_EXT_URI, IS_SEQUENCE_NUMBER)


def get_parent_newspaper(obj: Any) -> Optional[str]:
    """Identifier of the newspaper an issue belongs to, or None."""
    return _first_value(obj, FEDORA_RELS_EXT_URI, IS_MEMBER_OF)


def get_date_issued(obj: Any) -> datetime:
    """
    Date an issue was published, from its dateIssued relationship.

    Falls back to the current time when the relationship is missing or
    unreadable, so callers always get a date.
    """
    value = _first_value(obj, ISLANDORA_RELS_EXT_URI, DATE_ISSUED, literal=True)
    if value is None:
        return datetime.now()

    issued = parse_datetime(value)
    if issued is None:
        logger.warning(f"Unparseable dateIssued relationship '{value}' on {obj.id}",
                       extra={'issue_id': obj.id})
        return datetime.now()
    return issued


def set_date_issued(obj: Any, issued: Union[date, datetime]) -> None:
    """
    Replace the dateIssued relationship of an issue.

    Every existing dateIssued literal is removed before exactly one new value
    (YYYY-MM-DD) is added. Store failures propagate.
    """
    obj.relationships.remove(ISLANDORA_RELS_EXT_URI, DATE_ISSUED, None, True)
    obj.relationships.add(ISLANDORA_RELS_EXT_URI, DATE_ISSUED, format_issue_date(issued), True)
