# File: date_utils.py

from typing import Optional, Union
from datetime import datetime, date

# Format written to relationships and metadata documents
ISSUE_DATE_FORMAT = '%Y-%m-%d'

# Formats accepted when reading dates back from the stores
DATE_FORMATS = [
    '%Y-%m-%dT%H:%M:%S.%fZ',  # Search index: 1898-01-31T00:00:00.000Z
    '%Y-%m-%dT%H:%M:%SZ',     # Search index: 1898-01-31T00:00:00Z
    '%Y-%m-%dT%H:%M:%S',      # ISO datetime: 1898-01-31T00:00:00
    '%Y-%m-%d',               # ISO format: 1898-01-31
    '%Y/%m/%d',               # Alternative ISO: 1898/01/31
    '%Y.%m.%d',               # Alternative ISO: 1898.01.31
    '%m/%d/%Y',               # US format: 01/31/1898
    '%b %d, %Y',              # Month name: Jan 31, 1898
    '%B %d, %Y',              # Full month name: January 31, 1898
    '%d %B %Y',               # Alternative full month name: 31 January 1898
    '%Y-%m',                  # Year and month: 1898-01
    '%Y',                     # Just year: 1898
]


def parse_datetime(date_string: Optional[str]) -> Optional[datetime]:
    """
    Parse a date string in the formats the repository stores produce.

    Args:
        date_string: Date string to parse

    Returns:
        datetime object or None if parsing fails
    """
    if not date_string or not isinstance(date_string, str):
        return None

    date_string = date_string.strip()

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(date_string, fmt)
        except ValueError:
            continue

    # Offsets such as +00:00 or -05:00
    try:
        return datetime.fromisoformat(date_string)
    except ValueError:
        return None


def format_issue_date(dt: Union[date, datetime]) -> str:
    """
    Format a date as YYYY-MM-DD.

    Args:
        dt: Date or datetime to format

    Returns:
        Formatted date string
    """
    return dt.strftime(ISSUE_DATE_FORMAT)
