""" Basic functionality tests for searching and the search presets

The session wraps a mocked ldap3 connection.
"""

from unittest.mock import MagicMock

from ldap3.core.exceptions import LDAPInvalidFilterError, LDAPSocketReceiveError
import pytest

from ldap_client import SearchFailed, SessionClosed
from ldap_client.models import ConnectionParameters, Scope, SearchRequest
from ldap_client.search import (
    PRESETS,
    describe_request,
    normalise_response,
    preset_request,
    search,
)
from ldap_client.session import Session

SUCCESS = {"result": 0, "description": "success", "message": ""}


def _entry(dn, raw_attributes):
    return {
        "type": "searchResEntry",
        "dn": dn,
        "raw_attributes": raw_attributes,
        "attributes": {},
    }


@pytest.fixture(name="ldap_connection")
def fixture_ldap_connection():
    """Fixture to create a mock connection returning the given response"""

    def _ldap_connection(response, result=None):
        mock_connection = MagicMock()
        mock_connection.search.return_value = True
        mock_connection.response = response
        mock_connection.result = SUCCESS if result is None else result
        return mock_connection

    return _ldap_connection


@pytest.fixture(name="params")
def fixture_params():
    """Connection parameters for a made up server"""
    return ConnectionParameters(
        "ldap://ldap.example.org", "cn=admin,dc=example,dc=org", "pw", "dc=example,dc=org"
    )


@pytest.fixture(name="request_all")
def fixture_request_all():
    """Subtree search for everything"""
    return SearchRequest("dc=example,dc=org", Scope.SUBTREE, "(objectClass=*)")


def test_search(ldap_connection, params, request_all):
    """Entries come back normalised, in server order"""
    connection = ldap_connection(
        [
            _entry(
                "uid=jsmith,dc=example,dc=org",
                {"uid": [b"jsmith"], "mail": [b"js@example.org", b"john@example.org"]},
            ),
            _entry("uid=adoe,dc=example,dc=org", {"uid": [b"adoe"]}),
        ]
    )
    entries = search(Session(connection, params), request_all)

    connection.search.assert_called_once_with(
        search_base="dc=example,dc=org",
        search_filter="(objectClass=*)",
        search_scope="SUBTREE",
        attributes=["*"],
    )
    assert [entry.dn for entry in entries] == [
        "uid=jsmith,dc=example,dc=org",
        "uid=adoe,dc=example,dc=org",
    ]
    assert entries[0].attributes == {
        "uid": ("jsmith",),
        "mail": ("js@example.org", "john@example.org"),
    }


def test_search_no_entries(ldap_connection, params, request_all):
    """Finding nothing is an empty list, not an error"""
    connection = ldap_connection([])
    assert search(Session(connection, params), request_all) == []


def test_search_server_error(ldap_connection, params, request_all):
    """A non-success result code is a SearchFailed carrying the detail"""
    connection = ldap_connection(
        [],
        {"result": 32, "description": "noSuchObject", "message": "no such base"},
    )
    connection.search.return_value = False
    with pytest.raises(SearchFailed) as excinfo:
        search(Session(connection, params), request_all)
    assert "noSuchObject (no such base)" in str(excinfo.value)


def test_search_size_limit(ldap_connection, params, request_all):
    """Partial results with sizeLimitExceeded are still a failure"""
    connection = ldap_connection(
        [_entry("uid=adoe,dc=example,dc=org", {"uid": [b"adoe"]})],
        {"result": 4, "description": "sizeLimitExceeded", "message": ""},
    )
    with pytest.raises(SearchFailed) as excinfo:
        search(Session(connection, params), request_all)
    assert "sizeLimitExceeded" in str(excinfo.value)


@pytest.mark.parametrize(
    "error",
    [
        LDAPInvalidFilterError("malformed filter"),
        LDAPSocketReceiveError("connection reset"),
    ],
)
def test_search_raises(ldap_connection, params, error):
    """Client side and transport errors become SearchFailed"""
    connection = ldap_connection([])
    connection.search.side_effect = error
    request = SearchRequest("dc=example,dc=org", Scope.SUBTREE, "(cn=")
    with pytest.raises(SearchFailed) as excinfo:
        search(Session(connection, params), request)
    assert excinfo.value.__cause__ is error
    assert "(cn=" in str(excinfo.value)


def test_search_closed_session(ldap_connection, params, request_all):
    """A closed session can't be searched"""
    session = Session(ldap_connection([]), params)
    session.closed = True
    with pytest.raises(SessionClosed):
        search(session, request_all)


def test_normalise_skips_references_and_binary():
    """References, binary values and empty attributes are left out"""
    entries = normalise_response(
        [
            {"type": "searchResRef", "uri": ["ldap://other.example.org/"]},
            _entry(
                "uid=jsmith,dc=example,dc=org",
                {
                    "uid": [b"jsmith"],
                    "jpegPhoto": [b"\xff\xd8\xff\xe0"],
                    "description": [],
                    "cn": [b"J\xc3\xb6rg"],
                },
            ),
        ]
    )
    assert len(entries) == 1
    assert entries[0].attributes == {"uid": ("jsmith",), "cn": ("Jörg",)}


def test_normalise_nothing():
    """A missing response is no entries"""
    assert normalise_response(None) == []


@pytest.mark.parametrize(
    "name, search_filter, attributes",
    [
        (
            "users",
            "(objectClass=inetOrgPerson)",
            ("cn", "sn", "givenName", "mail", "uid"),
        ),
        ("groups", "(objectClass=groupOfNames)", ("cn", "description", "member")),
    ],
)
def test_list_presets(name, search_filter, attributes):
    """The users and groups presets are fixed subtree searches"""
    request = preset_request(name, "dc=example,dc=org")
    assert request.base_dn == "dc=example,dc=org"
    assert request.scope is Scope.SUBTREE
    assert request.search_filter == search_filter
    assert request.attributes == attributes


def test_test_preset():
    """The connection test reads just the base entry"""
    request = preset_request("test", "dc=example,dc=org")
    assert request.scope is Scope.BASE
    assert request.search_filter == "(objectClass=*)"
    assert request.attributes == ("*",)
    assert set(PRESETS) == {"users", "groups", "test"}


def test_describe_request():
    """The status lines name the filter, base, scope and attributes"""
    assert describe_request(preset_request("groups", "dc=example,dc=org")) == [
        "Searching with filter: (objectClass=groupOfNames)",
        "Base DN: dc=example,dc=org",
        "Scope: sub",
        'Attributes: ["cn", "description", "member"]',
        "",
    ]
