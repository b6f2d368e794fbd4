#!/usr/bin/env python3
# File: test_backends.py

import os
import sys
import unittest
from datetime import datetime
from unittest.mock import Mock, patch

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from newspaper_metadata.access_control import UserAccessControl
from newspaper_metadata.backends import (
    TriplestoreIssueBackend, SearchIndexIssueBackend, get_issue_backend,
)
from newspaper_metadata.config import MetadataConfig
from newspaper_metadata.exceptions import SearchIndexError
from newspaper_metadata.messages import MessageQueue, ERROR
from newspaper_metadata.search_index import SearchResult


def solr_objects(first, count):
    return [
        {
            'PID': f'newspaper:{n}',
            'solr_doc': {
                'PID': f'newspaper:{n}',
                'fgs_label_s': f'Issue {n}',
                'mods_originInfo_dateIssued_dt': '1898-07-04T00:00:00Z',
                'RELS_EXT_isSequenceNumber_literal_ms': [str(n)],
            },
        }
        for n in range(first, first + count)
    ]


class TestTriplestoreIssueBackend(unittest.TestCase):
    """Test cases for listing issues from the resource index."""

    def setUp(self):
        self.fedora = Mock()
        self.fedora.ri.sparql_query.return_value = [
            {
                'object': {'value': 'newspaper:2', 'uri': True},
                'label': {'value': 'July 4, 1898', 'uri': False},
                'sequence': {'value': '1', 'uri': False},
                'issued': {'value': '1898-07-04', 'uri': False},
            },
            {
                'object': {'value': 'newspaper:3', 'uri': True},
                'label': {'value': 'July 5, 1898', 'uri': False},
                'sequence': {'value': '2', 'uri': False},
                'issued': {'value': '1898-07-05', 'uri': False},
            },
        ]

    def test_list_issues(self):
        backend = TriplestoreIssueBackend(self.fedora, config=MetadataConfig())
        issues = backend.list_issues('newspaper:1')

        self.assertEqual([i.identifier for i in issues], ['newspaper:2', 'newspaper:3'])
        self.assertEqual(issues[1].issued, datetime(1898, 7, 5))
        self.fedora.ri.sparql_query.assert_called_once()
        query = self.fedora.ri.sparql_query.call_args[0][0]
        self.assertIn('<info:fedora/newspaper:1>', query)

    def test_access_control_reaches_query(self):
        backend = TriplestoreIssueBackend(self.fedora, UserAccessControl('jo'), MetadataConfig())
        backend.list_issues('newspaper:1')
        query = self.fedora.ri.sparql_query.call_args[0][0]
        self.assertIn("?user = 'jo'", query)

    def test_missing_dates_variant(self):
        backend = TriplestoreIssueBackend(self.fedora, config=MetadataConfig())
        backend.list_issues(None, missing_dates_only=True)
        query = self.fedora.ri.sparql_query.call_args[0][0]
        self.assertNotIn('isMemberOf', query)
        self.assertIn('!bound(?issued)', query)


class TestSearchIndexIssueBackend(unittest.TestCase):
    """Test cases for paging issues out of the search index."""

    def setUp(self):
        self.config = MetadataConfig(solr_batch_size=10000)
        self.solr = Mock()
        self.messages = MessageQueue()
        self.backend = SearchIndexIssueBackend(self.solr, self.config, self.messages)

    def test_pages_until_total(self):
        self.solr.search.side_effect = [
            SearchResult(25000, 0, solr_objects(0, 10000)),
            SearchResult(25000, 10000, solr_objects(10000, 10000)),
            SearchResult(25000, 20000, solr_objects(20000, 5000)),
        ]

        rows = self.backend.fetch_rows('newspaper:1')

        self.assertEqual(len(rows), 25000)
        self.assertEqual(self.solr.search.call_count, 3)
        starts = [call[0][1]['start'] for call in self.solr.search.call_args_list]
        self.assertEqual(starts, [0, 10000, 20000])
        self.assertEqual(rows[10000]['PID'], 'newspaper:10000')
        self.assertEqual(self.messages.get_messages(), [])

    def test_error_keeps_earlier_pages(self):
        self.solr.search.side_effect = [
            SearchResult(25000, 0, solr_objects(0, 10000)),
            SearchIndexError('RELS_EXT_isMemberOf_uri_ms:"info:fedora/newspaper:1"', 'connection reset'),
            SearchResult(25000, 20000, solr_objects(20000, 5000)),
        ]

        rows = self.backend.fetch_rows('newspaper:1')

        self.assertEqual(len(rows), 10000)
        self.assertEqual(self.solr.search.call_count, 2)
        messages = self.messages.get_messages()
        self.assertEqual(len(messages), 1)
        self.assertEqual(messages[0]['level'], ERROR)
        self.assertIn('connection reset', messages[0]['text'])

    def test_error_on_first_page(self):
        self.solr.search.side_effect = SearchIndexError('q', 'down')
        self.assertEqual(self.backend.list_issues('newspaper:1'), [])
        self.assertEqual(len(self.messages.get_messages()), 1)

    def test_server_capped_pages(self):
        config = MetadataConfig(solr_batch_size=20)
        backend = SearchIndexIssueBackend(self.solr, config, self.messages)
        documents = solr_objects(0, 25)

        def capped_search(query, params):
            start = params['start']
            return SearchResult(25, start, documents[start:start + 10])

        self.solr.search.side_effect = capped_search

        rows = backend.fetch_rows('newspaper:1')

        self.assertEqual(len(rows), 25)
        starts = [call[0][1]['start'] for call in self.solr.search.call_args_list]
        self.assertEqual(starts, [0, 10, 20])
        self.assertEqual([row['PID'] for row in rows], [doc['PID'] for doc in documents])

    def test_own_queue_when_none_given(self):
        first = SearchIndexIssueBackend(self.solr, self.config)
        second = SearchIndexIssueBackend(self.solr, self.config)
        self.assertIsNot(first.messages, second.messages)

        self.solr.search.side_effect = SearchIndexError('q', 'down')
        first.fetch_rows('newspaper:1')

        self.assertEqual(len(first.messages.get_messages()), 1)
        self.assertEqual(second.messages.get_messages(), [])

    def test_empty_page_stops(self):
        self.solr.search.return_value = SearchResult(50, 0, [])
        self.assertEqual(self.backend.fetch_rows('newspaper:1'), [])
        self.assertEqual(self.solr.search.call_count, 1)

    def test_query_and_params(self):
        self.solr.search.return_value = SearchResult(1, 0, solr_objects(1, 1))
        self.backend.list_issues('newspaper:1')

        query, params = self.solr.search.call_args[0]
        self.assertEqual(query, 'RELS_EXT_isMemberOf_uri_ms:"info:fedora/newspaper:1"')
        self.assertEqual(params['rows'], 10000)
        self.assertFalse(params['hl'])
        self.assertFalse(params['facet'])
        self.assertIn('mods_originInfo_dateIssued_dt', params['fl'])
        self.assertIn('RELS_EXT_isSequenceNumber_literal_ms', params['fl'])
        self.assertIn('RELS_EXT_hasModel_uri_ms:("info:fedora/islandora:newspaperIssueCModel" '
                      'OR "islandora:newspaperIssueCModel")', params['fq'])

    def test_query_escapes_identifier(self):
        self.assertEqual(self.backend.build_query('newspaper:"1"'),
                         'RELS_EXT_isMemberOf_uri_ms:"info:fedora/newspaper:\\"1\\""')
        self.assertEqual(self.backend.build_query(None), '*:*')

    def test_configured_fields(self):
        config = MetadataConfig(solr_parent_field='parent_ms', solr_date_field='issued_dt')
        backend = SearchIndexIssueBackend(self.solr, config, self.messages)
        self.solr.search.return_value = SearchResult(0, 0, [])
        backend.fetch_rows('newspaper:1', missing_dates_only=True)

        query, params = self.solr.search.call_args[0]
        self.assertEqual(query, 'parent_ms:"info:fedora/newspaper:1"')
        self.assertIn('-issued_dt:[* TO *]', params['fq'])

    def test_row_without_identifier_skipped(self):
        objects = solr_objects(1, 1) + [{'PID': None, 'solr_doc': {'fgs_label_s': 'Orphan'}}]
        self.solr.search.return_value = SearchResult(2, 0, objects)

        with self.assertLogs('newspaper_metadata.backends', level='WARNING'):
            issues = self.backend.list_issues('newspaper:1')

        self.assertEqual([i.identifier for i in issues], ['newspaper:1'])

    def test_list_issues_normalizes(self):
        self.solr.search.return_value = SearchResult(2, 0, solr_objects(1, 2))
        issues = self.backend.list_issues('newspaper:1')
        self.assertEqual([i.identifier for i in issues], ['newspaper:1', 'newspaper:2'])
        self.assertEqual(issues[0].sequence, '1')
        self.assertEqual(issues[0].issued, datetime(1898, 7, 4))


class TestBackendSelection(unittest.TestCase):
    """Test cases for choosing a backend from configuration."""

    def test_triplestore_by_default(self):
        backend = get_issue_backend(MetadataConfig(), fedora_client=Mock())
        self.assertIsInstance(backend, TriplestoreIssueBackend)

    def test_search_index_when_configured(self):
        backend = get_issue_backend(MetadataConfig(use_solr_for_issues=True), solr_client=Mock())
        self.assertIsInstance(backend, SearchIndexIssueBackend)

    @patch('newspaper_metadata.backends.SolrClient')
    def test_creates_missing_client(self, mock_solr_client):
        config = MetadataConfig(use_solr_for_issues=True)
        backend = get_issue_backend(config)
        mock_solr_client.assert_called_once_with(config)
        self.assertIs(backend.solr_client, mock_solr_client.return_value)


if __name__ == '__main__':
    unittest.main()
