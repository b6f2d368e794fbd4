#!/usr/bin/env python3
# File: backends.py

"""
Issue listing backends.

Issues can be listed either from the Fedora resource index (SPARQL) or from
the Solr search index. Both backends return the same normalized IssueRecord
list; which one is used is decided once, from configuration, by
get_issue_backend().
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .access_control import AccessControlProvider
from .config import MetadataConfig, get_config
from .exceptions import SearchIndexError
from .fedora import FedoraClient
from .messages import MessageQueue, ERROR
from .namespaces import ISSUE_CMODEL, pid_to_uri
from .normalize import IssueRecord, normalize, TRIPLESTORE, SEARCH_INDEX
from .queries import build_issues_query
from .search_index import SolrClient, quote_phrase

logger = logging.getLogger(__name__)


class IssueBackend(ABC):
    """Common interface for issue listing backends."""

    kind: str = ''

    def __init__(self, config: Optional[MetadataConfig] = None):
        self.config = config or get_config()

    @abstractmethod
    def fetch_rows(self, newspaper_id: Optional[str], missing_dates_only: bool = False) -> List[Dict[str, Any]]:
        """
        Run the backend query and return raw result rows.

        Args:
            newspaper_id: Parent newspaper identifier, or None for every issue
            missing_dates_only: Only return issues without an issue date
        """
        pass

    def list_issues(self, newspaper_id: Optional[str], missing_dates_only: bool = False) -> List[IssueRecord]:
        """
        List issues as normalized records.

        Args:
            newspaper_id: Parent newspaper identifier, or None for every issue
            missing_dates_only: Only return issues without an issue date

        Returns:
            List of IssueRecord in backend order; rows without an identifier
            are skipped
        """
        rows = self.fetch_rows(newspaper_id, missing_dates_only)
        issues = []
        for row in rows:
            issue = normalize(row, self.kind, self.config)
            if not issue.identifier:
                logger.warning(f"Skipping {self.kind} row without an identifier: {row}")
                continue
            issues.append(issue)
        logger.info(f"Listed {len(issues)} issues of {newspaper_id or 'all newspapers'} from {self.kind}")
        return issues


class TriplestoreIssueBackend(IssueBackend):
    """Lists issues with a single SPARQL query against the resource index."""

    kind = TRIPLESTORE

    def __init__(self, fedora_client, access_control: Optional[AccessControlProvider] = None,
                 config: Optional[MetadataConfig] = None):
        """
        Args:
            fedora_client: Client exposing ``ri.sparql_query``
            access_control: Provider of access-control query clauses
            config: Configuration to use
        """
        super().__init__(config)
        self.fedora_client = fedora_client
        self.access_control = access_control or AccessControlProvider()

    def fetch_rows(self, newspaper_id: Optional[str], missing_dates_only: bool = False) -> List[Dict[str, Any]]:
        query = build_issues_query(newspaper_id, self.access_control, missing_dates_only)
        return self.fedora_client.ri.sparql_query(query)


class SearchIndexIssueBackend(IssueBackend):
    """
    Lists issues from the search index, one page at a time.

    Pages are requested until the reported total has been collected. A failed
    page stops paging; rows already collected are kept and the user is told
    through the message queue.
    """

    kind = SEARCH_INDEX

    def __init__(self, solr_client, config: Optional[MetadataConfig] = None,
                 messages: Optional[MessageQueue] = None):
        """
        Args:
            solr_client: Client exposing ``search(query, params)``
            config: Configuration naming the index fields and batch size
            messages: Queue receiving user-facing error notices
        """
        super().__init__(config)
        self.solr_client = solr_client
        self.messages = messages if messages is not None else MessageQueue()

    def build_query(self, newspaper_id: Optional[str]) -> str:
        if newspaper_id is None:
            return '*:*'
        return f'{self.config.solr_parent_field}:{quote_phrase(pid_to_uri(newspaper_id))}'

    def build_params(self, missing_dates_only: bool = False) -> Dict[str, Any]:
        config = self.config
        filters = [
            f'{config.solr_content_model_field}:("{pid_to_uri(ISSUE_CMODEL)}" OR "{ISSUE_CMODEL}")',
        ]
        if missing_dates_only:
            filters.append(f'-{config.solr_date_field}:[* TO *]')
        return {
            'fl': ', '.join([config.solr_identifier_field, config.solr_label_field,
                             config.solr_date_field, config.solr_sequence_field]),
            'fq': filters,
            'rows': config.solr_batch_size,
            'start': 0,
            'hl': False,
            'facet': False,
        }

    def fetch_rows(self, newspaper_id: Optional[str], missing_dates_only: bool = False) -> List[Dict[str, Any]]:
        query = self.build_query(newspaper_id)
        params = self.build_params(missing_dates_only)

        rows: List[Dict[str, Any]] = []
        start = 0
        while True:
            params['start'] = start
            try:
                result = self.solr_client.search(query, dict(params))
            except SearchIndexError as e:
                logger.error(f"Search index paging stopped at offset {start} for {newspaper_id}: {e}")
                self.messages.set_message(
                    f"Unable to load all issues from the search index: {e.message}", ERROR)
                break

            rows.extend(result.objects)
            logger.debug(f"Fetched {len(rows)}/{result.num_found} issue rows")
            if len(rows) >= result.num_found or not result.objects:
                break
            # The server may cap rows below the requested batch size
            start += len(result.objects)

        return rows


def get_issue_backend(config: Optional[MetadataConfig] = None,
                      fedora_client=None,
                      solr_client=None,
                      access_control: Optional[AccessControlProvider] = None,
                      messages: Optional[MessageQueue] = None) -> IssueBackend:
    """
    Select the issue backend named by configuration.

    Clients that are not supplied are created from the configuration.

    Returns:
        SearchIndexIssueBackend when ``use_solr_for_issues`` is set,
        TriplestoreIssueBackend otherwise
    """
    config = config or get_config()
    if config.use_solr_for_issues:
        if solr_client is None:
            solr_client = SolrClient(config)
        return SearchIndexIssueBackend(solr_client, config, messages)

    if fedora_client is None:
        fedora_client = FedoraClient(config)
    return TriplestoreIssueBackend(fedora_client, access_control, config)
