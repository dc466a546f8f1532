"""Opens, binds and closes the connection to the LDAP server"""

from contextlib import contextmanager
import logging

import ldap3
from ldap3.core.exceptions import LDAPException

from . import BindFailed, ConnectFailed, SessionClosed, UnbindFailed
from .models import ConnectionParameters


def describe_result(result) -> str:
    """Summarise an ldap3 result dict as 'description (message)'"""
    if not result:
        return "no result from server"
    description = result.get("description") or f"result code {result.get('result')}"
    message = result.get("message")
    if message:
        return f"{description} ({message})"
    return description


class Session:
    """An authenticated connection, usable until close() is called"""

    def __init__(self, connection: ldap3.Connection, params: ConnectionParameters):
        self._connection = connection
        self.params = params
        self.closed = False

    @property
    def connection(self) -> ldap3.Connection:
        """The underlying ldap3 connection

        :raises SessionClosed: If the session has already been closed
        """
        if self.closed:
            raise SessionClosed(f"Session to {self.params.url} is already closed")
        return self._connection

    def close(self):
        """Unbind from the server

        The session is marked closed even when the unbind fails.

        :raises UnbindFailed: If the server connection couldn't be unbound
        """
        connection = self.connection
        self.closed = True
        logging.debug("Unbinding from %s", self.params.url)
        try:
            unbound = connection.unbind()
        except LDAPException as exc:
            raise UnbindFailed(exc) from exc
        if unbound is False:
            raise UnbindFailed(describe_result(connection.result))


def _release(connection: ldap3.Connection):
    """Drop the socket of a connection that never became a session"""
    try:
        connection.unbind()
    except LDAPException as exc:
        logging.debug("Ignoring error closing unbound connection: %s", exc)


def open_session(params: ConnectionParameters) -> Session:
    """Connect to the server and perform a simple bind

    :raises ConnectFailed: If the server can't be reached
    :raises BindFailed: If the server rejects the credentials
    """
    logging.debug("Connecting to %s", params.url)
    try:
        # Names are passed through untouched, the server decides what is valid
        server = ldap3.Server(params.url, get_info=ldap3.NONE)
        connection = ldap3.Connection(
            server,
            user=params.bind_dn,
            password=params.password,
            authentication=ldap3.SIMPLE,
            check_names=False,
        )
        connection.open()
    except LDAPException as exc:
        raise ConnectFailed(params.url, exc) from exc

    # Without a bind the server would silently treat us as anonymous
    logging.debug("Binding as %s", params.bind_dn)
    try:
        bound = connection.bind()
    except LDAPException as exc:
        _release(connection)
        raise BindFailed(params.bind_dn, exc) from exc
    if not bound:
        cause = describe_result(connection.result)
        _release(connection)
        raise BindFailed(params.bind_dn, cause)

    print("✓ Successfully connected and authenticated to LDAP server")
    return Session(connection, params)


@contextmanager
def session_scope(params: ConnectionParameters):
    """Open a session for the duration of a with block and always close it

    If the block raised, a failing unbind is only logged so the original
    error reaches the caller.
    """
    session = open_session(params)
    try:
        yield session
    except BaseException:
        if not session.closed:
            try:
                session.close()
            except UnbindFailed as exc:
                logging.warning("%s", exc)
        raise
    if not session.closed:
        session.close()
