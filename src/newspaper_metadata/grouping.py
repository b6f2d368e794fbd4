# File: grouping.py

"""
Indexing and calendar grouping of issue records.
"""

from typing import Dict, List, Sequence

from .normalize import IssueRecord

GroupedIssues = Dict[str, Dict[str, Dict[str, List[IssueRecord]]]]


def to_identifier_map(issues: Sequence[IssueRecord]) -> Dict[str, IssueRecord]:
    """
    Key issues by identifier.

    An empty list gives an empty mapping; a repeated identifier keeps the
    last record seen.
    """
    if not issues:
        return {}
    return {issue.identifier: issue for issue in issues}


def group_by_date(issues: Sequence[IssueRecord]) -> GroupedIssues:
    """
    Bucket issues by year, month and day of their issue date.

    Keys are strings: the four digit year, then the zero-padded month and
    day. Issues sharing a day keep their input order.
    """
    grouped: GroupedIssues = {}
    for issue in issues:
        year = issue.issued.strftime('%Y')
        month = issue.issued.strftime('%m')
        day = issue.issued.strftime('%d')
        grouped.setdefault(year, {}).setdefault(month, {}).setdefault(day, []).append(issue)
    return grouped
