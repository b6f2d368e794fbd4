# File: exceptions.py

"""
Exceptions raised by the newspaper metadata helpers.
"""

from typing import Dict


class MetadataError(Exception):
    """Base exception class for all newspaper metadata errors."""
    def __init__(self, message: str, details: Dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigError(MetadataError):
    """Exception raised for configuration errors."""
    pass


class RepositoryConnectionError(MetadataError):
    """Exception raised when the object store or resource index cannot be reached."""
    def __init__(self, url: str, reason: str, details: Dict = None):
        message = f"Repository request to {url} failed: {reason}"
        details = details or {}
        details.update({"url": url})
        super().__init__(message, details)


class SearchIndexError(MetadataError):
    """Exception raised when a search index query fails."""
    def __init__(self, query: str, reason: str, details: Dict = None):
        message = f"Search index query failed: {reason}"
        details = details or {}
        details.update({"query": query})
        super().__init__(message, details)


class InvalidIdentifierError(MetadataError):
    """Exception raised when an object identifier cannot be placed in a query."""
    def __init__(self, identifier: str, reason: str, details: Dict = None):
        message = f"Invalid object identifier {identifier!r}: {reason}"
        details = details or {}
        details.update({"identifier": identifier})
        super().__init__(message, details)
