# File: namespaces.py

"""
Namespace URIs, relationship predicates and content models used by
newspaper objects in the repository.
"""

# Relationship namespaces
ISLANDORA_RELS_EXT_URI = 'http://islandora.ca/ontology/relsext#'
FEDORA_RELS_EXT_URI = 'info:fedora/fedora-system:def/relations-external#'
FEDORA_MODEL_URI = 'info:fedora/fedora-system:def/model#'

# Predicates under ISLANDORA_RELS_EXT_URI
IS_PAGE_OF = 'isPageOf'
IS_SEQUENCE_NUMBER = 'isSequenceNumber'
IS_PAGE_NUMBER = 'isPageNumber'
DATE_ISSUED = 'dateIssued'
IS_VIEWABLE_BY_USER = 'isViewableByUser'
IS_VIEWABLE_BY_ROLE = 'isViewableByRole'
IS_MANAGEABLE_BY_USER = 'isManageableByUser'
IS_MANAGEABLE_BY_ROLE = 'isManageableByRole'

# Predicates under FEDORA_RELS_EXT_URI
IS_MEMBER_OF = 'isMemberOf'

# Predicates under FEDORA_MODEL_URI
HAS_MODEL = 'hasModel'
LABEL = 'label'

# Content models
NEWSPAPER_CMODEL = 'islandora:newspaperCModel'
ISSUE_CMODEL = 'islandora:newspaperIssueCModel'
PAGE_CMODEL = 'islandora:newspaperPageCModel'

# Prefix the object store puts in front of object identifiers in URIs
FEDORA_URI_PREFIX = 'info:fedora/'

# Descriptive metadata
MODS_NS = 'http://www.loc.gov/mods/v3'
MODS_DATASTREAM_ID = 'MODS'

RDF_NS = 'http://www.w3.org/1999/02/22-rdf-syntax-ns#'


def pid_to_uri(pid: str) -> str:
    """Return the info:fedora URI for an object identifier."""
    if pid.startswith(FEDORA_URI_PREFIX):
        return pid
    return f"{FEDORA_URI_PREFIX}{pid}"


def uri_to_pid(uri: str) -> str:
    """Strip the info:fedora prefix from a URI, if present."""
    if uri.startswith(FEDORA_URI_PREFIX):
        return uri[len(FEDORA_URI_PREFIX):]
    return uri
