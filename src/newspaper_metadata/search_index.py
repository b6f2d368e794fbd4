# File: search_index.py

"""
Search index client.

Wraps the Solr ``select`` handler. Every returned object carries the
identifier at the top level and the raw index document under ``solr_doc``;
``field()`` reads a value from either place so callers never need to know
which shape a row has.
"""

import logging
from dataclasses import dataclass, field as dataclass_field
from typing import Any, Dict, List, Optional

import requests

from .config import MetadataConfig, get_config
from .exceptions import SearchIndexError

logger = logging.getLogger(__name__)

# Key under which the raw index document is nested in each result object
DOCUMENT_KEY = 'solr_doc'

# Options recognised by SolrClient.search
SEARCH_OPTIONS = ('rows', 'limit', 'fl', 'start', 'fq', 'sort', 'hl', 'facet')


@dataclass
class SearchResult:
    """Envelope for one page of search results."""
    num_found: int = 0
    start: int = 0
    objects: List[Dict[str, Any]] = dataclass_field(default_factory=list)


def field(row: Dict[str, Any], name: str, default: Any = None) -> Any:
    """
    Read a single value from a search result row.

    The value may sit at the top level of the row or under the nested
    document key; a one-element list is unwrapped to its only member.

    Args:
        row: Search result object
        name: Field name
        default: Returned when the field is absent or empty

    Returns:
        The scalar field value, or default
    """
    if name in row:
        value = row[name]
    elif isinstance(row.get(DOCUMENT_KEY), dict) and name in row[DOCUMENT_KEY]:
        value = row[DOCUMENT_KEY][name]
    else:
        return default

    if isinstance(value, (list, tuple)):
        if not value:
            return default
        if len(value) == 1:
            value = value[0]

    if value is None or value == '':
        return default
    return value


def quote_phrase(value: str) -> str:
    """Quote a value as a Solr phrase, escaping backslashes and double quotes."""
    escaped = value.replace('\\', '\\\\').replace('"', '\\"')
    return f'"{escaped}"'


class SolrClient:
    """Client for a Solr core."""

    def __init__(self, config: Optional[MetadataConfig] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            config: Configuration to use, defaults to the global configuration
            session: Optional pre-built requests session
        """
        self.config = config or get_config()
        self.select_url = f"{self.config.solr_url}/select"
        self.timeout = self.config.request_timeout
        self.session = session or requests.Session()

    def search(self, query: str, params: Optional[Dict[str, Any]] = None) -> SearchResult:
        """
        Run a query against the index.

        Args:
            query: Solr query string
            params: Options; 'limit' is an alias for 'rows', 'hl' and 'facet'
                accept booleans

        Returns:
            SearchResult for the requested page

        Raises:
            SearchIndexError: If the request fails or the response is malformed
        """
        params = dict(params or {})
        unknown = set(params) - set(SEARCH_OPTIONS)
        if unknown:
            raise SearchIndexError(query, f"Unsupported search options: {', '.join(sorted(unknown))}")

        request_params: Dict[str, Any] = {'q': query, 'wt': 'json'}
        if 'limit' in params:
            request_params['rows'] = params.pop('limit')
        for name, value in params.items():
            if isinstance(value, bool):
                value = 'true' if value else 'false'
            request_params[name] = value

        logger.debug(f"Search request: {self.select_url} params={request_params}")
        try:
            response = self.session.get(self.select_url, params=request_params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.error(f"Search request failed: {e}")
            raise SearchIndexError(query, str(e)) from e
        except ValueError as e:
            raise SearchIndexError(query, f"Invalid response: {e}") from e

        body = data.get('response')
        if not isinstance(body, dict):
            raise SearchIndexError(query, "Response has no 'response' section")

        identifier_field = self.config.solr_identifier_field
        objects = []
        for doc in body.get('docs', []):
            objects.append({
                identifier_field: field(doc, identifier_field),
                DOCUMENT_KEY: doc,
            })

        return SearchResult(
            num_found=int(body.get('numFound', 0)),
            start=int(body.get('start', 0)),
            objects=objects,
        )
