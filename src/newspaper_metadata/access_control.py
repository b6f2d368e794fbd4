# File: access_control.py

"""
Access-control fragments spliced into resource index queries.

A provider hands the query builder two lists: OPTIONAL sub-patterns that bind
the access-control variables, and FILTER expressions over those variables.
The base provider returns nothing, so queries run unrestricted when no policy
is configured.
"""

from typing import List, Sequence

from .namespaces import (
    ISLANDORA_RELS_EXT_URI,
    IS_VIEWABLE_BY_USER, IS_VIEWABLE_BY_ROLE,
    IS_MANAGEABLE_BY_USER, IS_MANAGEABLE_BY_ROLE,
)

ANONYMOUS_USER = 'anonymous'

# Predicates per access mode, as (user predicate, role predicate)
MODE_PREDICATES = {
    'view': (IS_VIEWABLE_BY_USER, IS_VIEWABLE_BY_ROLE),
    'manage': (IS_MANAGEABLE_BY_USER, IS_MANAGEABLE_BY_ROLE),
}


class AccessControlProvider:
    """Provider that applies no restrictions."""

    def get_query_optionals(self, mode: str = 'view') -> List[str]:
        return []

    def get_query_filters(self) -> List[str]:
        return []


class UserAccessControl(AccessControlProvider):
    """
    Restricts results to objects the given user may access.

    Objects with no user or role restriction are always visible; restricted
    objects are visible when the user name or one of the user's roles is
    listed on them.
    """

    def __init__(self, user_name: str = ANONYMOUS_USER, roles: Sequence[str] = ()):
        self.user_name = user_name or ANONYMOUS_USER
        self.roles = list(roles)

    def get_query_optionals(self, mode: str = 'view') -> List[str]:
        if mode not in MODE_PREDICATES:
            return []
        user_predicate, role_predicate = MODE_PREDICATES[mode]
        return [
            f"?object <{ISLANDORA_RELS_EXT_URI}{user_predicate}> ?user .",
            f"?object <{ISLANDORA_RELS_EXT_URI}{role_predicate}> ?role .",
        ]

    def get_query_filters(self) -> List[str]:
        conditions = [
            "(!bound(?user) && !bound(?role))",
            f"(bound(?user) && ?user = '{_quote(self.user_name)}')",
        ]
        if self.roles:
            role_matches = ' || '.join(f"?role = '{_quote(role)}'" for role in self.roles)
            conditions.append(f"(bound(?role) && ({role_matches}))")
        return [' || '.join(conditions)]


def _quote(value: str) -> str:
    return value.replace('\\', '\\\\').replace("'", "\\'")
