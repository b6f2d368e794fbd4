#!/usr/bin/env python3
# File: fedora.py

"""
Fedora Object Store Client

This module provides a thin client for the parts of the Fedora REST API the
newspaper helpers need:
- Reading object profiles (identifier and label)
- Reading, adding and purging RELS-EXT relationships
- Reading and replacing datastream content
- Running SPARQL queries against the resource index (risearch)

Requests are synchronous and are not retried; failures surface as
RepositoryConnectionError.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, NamedTuple, Optional

import requests

from .config import MetadataConfig, get_config
from .exceptions import RepositoryConnectionError
from .namespaces import RDF_NS, pid_to_uri, uri_to_pid, FEDORA_URI_PREFIX

logger = logging.getLogger(__name__)

PROFILE_NS = 'http://www.fedora.info/definitions/1/0/access/'


class Relationship(NamedTuple):
    """A single relationship read from an object."""
    namespace: str
    predicate: str
    value: str
    literal: bool


class FedoraClient:
    """
    Client for a Fedora 3 repository.

    Holds one HTTP session shared by every object handle and by the resource
    index client exposed as ``ri``.
    """

    def __init__(self, config: Optional[MetadataConfig] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            config: Configuration to use, defaults to the global configuration
            session: Optional pre-built requests session
        """
        self.config = config or get_config()
        self.base_url = self.config.fedora_url
        self.timeout = self.config.request_timeout
        self.session = session or requests.Session()
        if self.config.fedora_user:
            self.session.auth = (self.config.fedora_user, self.config.fedora_password)
        self.ri = ResourceIndexClient(self)

    def request(self, method: str, path: str, **kwargs) -> requests.Response:
        """
        Make an HTTP request against the repository.

        Args:
            method: HTTP method
            path: Path relative to the repository base URL
            **kwargs: Passed through to requests

        Returns:
            Response object from the request

        Raises:
            RepositoryConnectionError: If the request fails
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug(f"Repository request: {method} {url} params={kwargs.get('params')}")
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Repository request failed: {method} {url}: {e}")
            raise RepositoryConnectionError(url, str(e)) from e
        return response

    def get_object(self, pid: str) -> 'FedoraObject':
        """Return a handle for the object with the given identifier."""
        return FedoraObject(self, uri_to_pid(pid))


class ResourceIndexClient:
    """Runs queries against the Fedora resource index."""

    def __init__(self, client: FedoraClient):
        self.client = client

    def sparql_query(self, query: str) -> List[Dict[str, Dict[str, Any]]]:
        """
        Run a SPARQL tuple query.

        Args:
            query: SPARQL query string

        Returns:
            One dictionary per result row, mapping each bound variable to
            ``{'value': ..., 'uri': bool}``. Object URIs are returned as bare
            identifiers.
        """
        params = {
            'type': 'tuples',
            'lang': 'sparql',
            'format': 'json',
            'limit': '',
            'dt': 'on',
            'query': query,
        }
        response = self.client.request('POST', 'risearch', data=params)
        try:
            data = response.json()
        except ValueError as e:
            raise RepositoryConnectionError(response.url, f"Invalid resource index response: {e}") from e

        rows = []
        for result in data.get('results', []):
            row = {}
            for variable, value in result.items():
                if value is None:
                    continue
                value = str(value)
                row[variable] = {
                    'value': uri_to_pid(value),
                    'uri': value.startswith(FEDORA_URI_PREFIX),
                }
            rows.append(row)

        logger.info(f"Resource index returned {len(rows)} rows")
        return rows


class FedoraObject:
    """Handle for a single repository object."""

    def __init__(self, client: FedoraClient, pid: str):
        self.client = client
        self.id = pid
        self.relationships = FedoraRelationships(self)
        self._label = None

    @property
    def label(self) -> str:
        """The object label, read from the object profile."""
        if self._label is None:
            response = self.client.request('GET', f"objects/{self.id}", params={'format': 'xml'})
            profile = ET.fromstring(response.content)
            label = profile.find(f"{{{PROFILE_NS}}}objLabel")
            if label is None:
                label = profile.find('objLabel')
            self._label = (label.text or '') if label is not None else ''
        return self._label

    def datastream(self, dsid: str) -> 'FedoraDatastream':
        """Return a handle for one of the object's datastreams."""
        return FedoraDatastream(self, dsid)

    def __repr__(self):
        return f"FedoraObject({self.id!r})"


class FedoraRelationships:
    """The RELS-EXT relationships of an object."""

    def __init__(self, parent: FedoraObject):
        self.parent = parent

    def _path(self) -> str:
        return f"objects/{self.parent.id}/relationships"

    def get(self, namespace: Optional[str] = None, predicate: Optional[str] = None,
            value: Optional[str] = None, literal: Optional[bool] = None) -> List[Relationship]:
        """
        Return relationships matching every given criterion.

        Args:
            namespace: Predicate namespace URI
            predicate: Predicate name within the namespace
            value: Object value (identifier or literal text)
            literal: Restrict to literal or to object-reference relationships

        Returns:
            List of matching relationships, in the order the store returned them
        """
        params = {'subject': pid_to_uri(self.parent.id), 'format': 'xml'}
        if namespace and predicate:
            params['predicate'] = f"{namespace}{predicate}"
        response = self.parent.client.request('GET', self._path(), params=params)

        matches = []
        for relationship in parse_relationships(response.content):
            if namespace is not None and relationship.namespace != namespace:
                continue
            if predicate is not None and relationship.predicate != predicate:
                continue
            if value is not None and relationship.value != uri_to_pid(value):
                continue
            if literal is not None and relationship.literal != literal:
                continue
            matches.append(relationship)
        return matches

    def add(self, namespace: str, predicate: str, value: str, literal: bool = False) -> None:
        """Add a relationship to the object."""
        params = {
            'subject': pid_to_uri(self.parent.id),
            'predicate': f"{namespace}{predicate}",
            'object': value if literal else pid_to_uri(value),
            'isLiteral': 'true' if literal else 'false',
        }
        self.parent.client.request('POST', f"{self._path()}/new", params=params)
        logger.info(f"Added relationship {namespace}{predicate} -> {value} on {self.parent.id}")

    def remove(self, namespace: str, predicate: str, value: Optional[str] = None,
               literal: Optional[bool] = None) -> int:
        """
        Purge matching relationships from the object.

        Returns:
            Number of relationships removed
        """
        removed = 0
        for relationship in self.get(namespace, predicate, value, literal):
            params = {
                'subject': pid_to_uri(self.parent.id),
                'predicate': f"{relationship.namespace}{relationship.predicate}",
                'object': relationship.value if relationship.literal else pid_to_uri(relationship.value),
                'isLiteral': 'true' if relationship.literal else 'false',
            }
            self.parent.client.request('DELETE', self._path(), params=params)
            removed += 1
        if removed:
            logger.info(f"Removed {removed} {namespace}{predicate} relationship(s) from {self.parent.id}")
        return removed


class FedoraDatastream:
    """Handle for one datastream of an object."""

    def __init__(self, parent: FedoraObject, dsid: str):
        self.parent = parent
        self.id = dsid

    @property
    def content(self) -> str:
        response = self.parent.client.request(
            'GET', f"objects/{self.parent.id}/datastreams/{self.id}/content")
        return response.text

    def set_content_from_string(self, content: str) -> None:
        """Replace the datastream content."""
        self.parent.client.request(
            'PUT', f"objects/{self.parent.id}/datastreams/{self.id}",
            data=content.encode('utf-8'),
            headers={'Content-Type': 'text/xml'},
        )
        logger.info(f"Updated datastream {self.id} of {self.parent.id}")


def parse_relationships(rdf_xml: bytes) -> List[Relationship]:
    """
    Parse an RDF/XML relationships document.

    Args:
        rdf_xml: Document returned by the relationships endpoint

    Returns:
        List of relationships found on every description
    """
    root = ET.fromstring(rdf_xml)
    relationships = []
    for description in root.iter(f"{{{RDF_NS}}}Description"):
        for element in description:
            if element.tag.startswith('{'):
                namespace, _, predicate = element.tag[1:].partition('}')
            else:
                namespace, predicate = '', element.tag
            resource = element.get(f"{{{RDF_NS}}}resource")
            if resource is not None:
                relationships.append(Relationship(namespace, predicate, uri_to_pid(resource), False))
            else:
                relationships.append(Relationship(namespace, predicate, element.text or '', True))
    return relationships
