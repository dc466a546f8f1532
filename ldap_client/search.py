"""Runs a search over an open session and normalises the results"""

from dataclasses import dataclass
import json
import logging
from typing import Dict, List, Tuple

from ldap3.core.exceptions import LDAPException
from ldap3.core.results import RESULT_SUCCESS

from . import SearchFailed
from .models import ResultEntry, Scope, SearchRequest
from .resolver import resolve_attributes, scope_token
from .session import Session, describe_result


@dataclass(frozen=True)
class Preset:
    """A named, fixed search"""

    search_filter: str
    attributes: Tuple[str, ...]
    scope: Scope


PRESETS = {
    "users": Preset(
        search_filter="(objectClass=inetOrgPerson)",
        attributes=tuple(resolve_attributes("cn,sn,givenName,mail,uid")),
        scope=Scope.SUBTREE,
    ),
    "groups": Preset(
        search_filter="(objectClass=groupOfNames)",
        attributes=tuple(resolve_attributes("cn,description,member")),
        scope=Scope.SUBTREE,
    ),
    "test": Preset(
        search_filter="(objectClass=*)",
        attributes=tuple(resolve_attributes(None)),
        scope=Scope.BASE,
    ),
}


def preset_request(name: str, base_dn: str) -> SearchRequest:
    """Build the request for one of the PRESETS"""
    preset = PRESETS[name]
    return SearchRequest(
        base_dn=base_dn,
        scope=preset.scope,
        search_filter=preset.search_filter,
        attributes=preset.attributes,
    )


def describe_request(request: SearchRequest) -> List[str]:
    """Status lines announcing a search before it's sent"""
    return [
        f"Searching with filter: {request.search_filter}",
        f"Base DN: {request.base_dn}",
        f"Scope: {scope_token(request.scope)}",
        f"Attributes: {json.dumps(list(request.attributes))}",
        "",
    ]


def _decode_attributes(dn: str, raw_attributes) -> Dict[str, List[str]]:
    """Decode raw attribute values, leaving out anything that isn't text"""
    attributes = {}
    for name, values in raw_attributes.items():
        if not values:
            logging.debug("Skipping attribute '%s' of '%s' with no values", name, dn)
            continue
        try:
            decoded = [
                value.decode("utf-8") if isinstance(value, bytes) else str(value)
                for value in values
            ]
        except UnicodeDecodeError:
            logging.debug("Skipping binary attribute '%s' of '%s'", name, dn)
            continue
        attributes[name] = decoded
    return attributes


def normalise_response(response) -> List[ResultEntry]:
    """Convert an ldap3 search response into ResultEntry objects

    Search references are dropped, entry order is kept as received.
    """
    entries = []
    for item in response or []:
        if item.get("type") != "searchResEntry":
            logging.debug("Skipping %s in search response", item.get("type"))
            continue
        entries.append(
            ResultEntry(
                dn=item["dn"],
                attributes=_decode_attributes(item["dn"], item["raw_attributes"]),
            )
        )
    return entries


def search(session: Session, request: SearchRequest) -> List[ResultEntry]:
    """Send a search and return the entries found, which may be none

    :raises SearchFailed: If the search couldn't be sent, or the server
        answered with anything but success
    """
    connection = session.connection
    logging.debug(
        "Searching '%s' (%s) for %s",
        request.base_dn,
        request.scope.value,
        request.search_filter,
    )
    try:
        connection.search(
            search_base=request.base_dn,
            search_filter=request.search_filter,
            search_scope=request.scope.value,
            attributes=list(request.attributes),
        )
    except LDAPException as exc:
        raise SearchFailed(request.search_filter, exc) from exc

    result = connection.result
    if not result or result.get("result") != RESULT_SUCCESS:
        raise SearchFailed(request.search_filter, describe_result(result))

    entries = normalise_response(connection.response)
    logging.debug("Search returned %d entries", len(entries))
    return entries
