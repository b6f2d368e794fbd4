#!/usr/bin/env python3
# File: issues.py

"""
Newspaper Issue and Page Listings

This module is the entry point used by front-ends. It provides:
- Issues of a newspaper keyed by identifier, from the configured backend
- Calendar grouping of those issues (year / month / day)
- Issues across the repository that still need an issue date
- Pages of an issue, in sequence order
- Previous / next navigation between issues and between pages
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .access_control import AccessControlProvider
from .backends import IssueBackend, get_issue_backend
from .grouping import GroupedIssues, to_identifier_map, group_by_date
from .normalize import IssueRecord, PageRecord, normalize_page_row
from .queries import build_pages_query

logger = logging.getLogger(__name__)


def get_issues(newspaper_id: str, backend: Optional[IssueBackend] = None) -> Dict[str, IssueRecord]:
    """
    Get the issues of a newspaper.

    Args:
        newspaper_id: Newspaper identifier
        backend: Backend to query, defaults to the one selected by configuration

    Returns:
        Dictionary of IssueRecord keyed by issue identifier, in sequence order
    """
    backend = backend or get_issue_backend()
    return to_identifier_map(backend.list_issues(newspaper_id))


def get_issues_by_date(newspaper_id: str, backend: Optional[IssueBackend] = None) -> GroupedIssues:
    """
    Get the issues of a newspaper grouped as year -> month -> day -> [issues].
    """
    issues = get_issues(newspaper_id, backend)
    return group_by_date(list(issues.values()))


def get_issues_without_dates(backend: Optional[IssueBackend] = None) -> Dict[str, IssueRecord]:
    """
    Get every issue in the repository that has no issue date recorded.

    The issued field of the returned records is a placeholder.
    """
    backend = backend or get_issue_backend()
    return to_identifier_map(backend.list_issues(None, missing_dates_only=True))


def _sequence_key(sequence: Union[str, int, None]) -> Tuple[int, Union[int, str]]:
    try:
        return (0, int(sequence))
    except (TypeError, ValueError):
        return (1, str(sequence))


def get_pages(issue_id: str, fedora_client,
              access_control: Optional[AccessControlProvider] = None) -> Dict[str, PageRecord]:
    """
    Get the pages of an issue.

    Args:
        issue_id: Issue identifier
        fedora_client: Client exposing ``ri.sparql_query``
        access_control: Provider of access-control query clauses

    Returns:
        Dictionary of PageRecord keyed by page identifier, ordered by
        numeric sequence
    """
    query = build_pages_query(issue_id, access_control)
    pages = [normalize_page_row(row) for row in fedora_client.ri.sparql_query(query)]
    pages.sort(key=lambda page: _sequence_key(page.sequence))
    logger.info(f"Found {len(pages)} pages for issue {issue_id}")
    return {page.identifier: page for page in pages}


def _siblings(identifier: str, ordered_ids: Sequence[str]) -> Tuple[Optional[str], Optional[str]]:
    try:
        index = list(ordered_ids).index(identifier)
    except ValueError:
        return None, None
    previous_id = ordered_ids[index - 1] if index > 0 else None
    next_id = ordered_ids[index + 1] if index + 1 < len(ordered_ids) else None
    return previous_id, next_id


def get_issue_siblings(issue_id: str, issues: Dict[str, IssueRecord]) -> Tuple[Optional[str], Optional[str]]:
    """
    Find the issues published before and after an issue.

    Issues are ordered by issue date, then sequence.

    Returns:
        (previous identifier, next identifier); either is None at the ends or
        when the issue is not in the listing
    """
    ordered: List[IssueRecord] = sorted(
        issues.values(),
        key=lambda issue: (issue.issued.strftime('%Y-%m-%d'), _sequence_key(issue.sequence)))
    return _siblings(issue_id, [issue.identifier for issue in ordered])


def get_page_siblings(page_id: str, pages: Dict[str, PageRecord]) -> Tuple[Optional[str], Optional[str]]:
    """
    Find the pages before and after a page of the same issue.

    Returns:
        (previous identifier, next identifier); either is None at the ends or
        when the page is not in the listing
    """
    ordered = sorted(pages.values(), key=lambda page: _sequence_key(page.sequence))
    return _siblings(page_id, [page.identifier for page in ordered])
