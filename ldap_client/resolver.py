"""Turns command line strings into search parameters"""

from typing import List, Optional

import ldap3

from . import InvalidScope
from .models import Scope, SearchRequest

SCOPE_TOKENS = {
    "base": Scope.BASE,
    "one": Scope.ONELEVEL,
    "sub": Scope.SUBTREE,
}


def resolve_scope(token: str) -> Scope:
    """Map a scope token to a Scope

    :raises InvalidScope: If the token isn't exactly one of base, one or sub
    """
    try:
        return SCOPE_TOKENS[token]
    except KeyError as exc:
        raise InvalidScope(token) from exc


def scope_token(scope: Scope) -> str:
    """Reverse of resolve_scope"""
    for token, candidate in SCOPE_TOKENS.items():
        if candidate is scope:
            return token
    raise InvalidScope(scope)


def resolve_attributes(csv: Optional[str] = None) -> List[str]:
    """Split a comma separated attribute list, or ask for everything when absent

    Names are stripped but otherwise passed through untouched, the server
    decides what is valid.
    """
    if csv is None:
        return [ldap3.ALL_ATTRIBUTES]
    return [name.strip() for name in csv.split(",")]


def build_request(
    base_dn: str,
    scope: str,
    search_filter: str,
    attributes: Optional[str] = None,
) -> SearchRequest:
    """Build a SearchRequest from the raw command line values"""
    return SearchRequest(
        base_dn=base_dn,
        scope=resolve_scope(scope),
        search_filter=search_filter,
        attributes=resolve_attributes(attributes),
    )
