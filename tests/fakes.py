# File: fakes.py

"""
In-memory stand-ins for repository object handles used by the tests.
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from newspaper_metadata.fedora import Relationship


class FakeRelationships:
    """Relationship collection kept in a list, in insertion order."""

    def __init__(self, relationships=None):
        self.items = list(relationships or [])

    def _matches(self, relationship, namespace, predicate, value, literal):
        return ((namespace is None or relationship.namespace == namespace) and
                (predicate is None or relationship.predicate == predicate) and
                (value is None or relationship.value == value) and
                (literal is None or relationship.literal == literal))

    def get(self, namespace=None, predicate=None, value=None, literal=None):
        return [r for r in self.items if self._matches(r, namespace, predicate, value, literal)]

    def add(self, namespace, predicate, value, literal=False):
        self.items.append(Relationship(namespace, predicate, value, literal))

    def remove(self, namespace, predicate, value=None, literal=None):
        kept = [r for r in self.items if not self._matches(r, namespace, predicate, value, literal)]
        removed = len(self.items) - len(kept)
        self.items = kept
        return removed


class FakeObject:
    """Repository object with relationships and datastreams held in memory."""

    def __init__(self, pid, relationships=None, datastreams=None):
        self.id = pid
        self.relationships = FakeRelationships(relationships)
        self.datastreams = {}
        for dsid, content in (datastreams or {}).items():
            self.datastreams[dsid] = FakeDatastream(content, self)

    def datastream(self, dsid):
        return self.datastreams[dsid]


class FakeDatastream:
    """Datastream whose content lives in memory; saving can be made to fail."""

    def __init__(self, content, parent=None, save_error=None):
        self.content = content
        self.parent = parent
        self.save_error = save_error
        self.saves = 0

    def set_content_from_string(self, content):
        if self.save_error is not None:
            raise self.save_error
        self.content = content
        self.saves += 1
