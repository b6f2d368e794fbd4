"""
Newspaper Metadata Package

This package provides metadata helpers for newspapers stored in a Fedora
repository: parent/child lookups between newspapers, issues and pages,
issue listings from the resource index or the search index, calendar
grouping of issues, and reading and writing issue dates.
"""

from .config import MetadataConfig, ConfigManager, get_config
from .exceptions import (
    MetadataError, ConfigError, RepositoryConnectionError, SearchIndexError, InvalidIdentifierError,
)
from .access_control import AccessControlProvider, UserAccessControl
from .normalize import IssueRecord, PageRecord, normalize
from .backends import IssueBackend, TriplestoreIssueBackend, SearchIndexIssueBackend, get_issue_backend
from .grouping import to_identifier_map, group_by_date
from .relationships import (
    get_parent_issue, get_sequence, get_parent_newspaper, get_date_issued, set_date_issued,
)
from .mods import read_date, write_date
from .issues import (
    get_issues, get_issues_by_date, get_issues_without_dates, get_pages,
    get_issue_siblings, get_page_siblings,
)

__version__ = '1.0.0'
