"""LDAP search client namespace"""


class LdapClientException(Exception):
    """Generic ldap_client exception. Base class for all the others"""


class ConfigException(LdapClientException):
    """Exception relating to configuration errors"""


class ConfigMissingFields(ConfigException):
    """Exception caused by config having missing fields"""

    def __init__(self, missing_fields, config):
        self.config = config
        self.missing_fields = missing_fields
        self.message = (
            f"Config has fields '{sorted(config.keys())}', "
            + f"missing fields '{sorted(missing_fields)}'"
        )
        super().__init__(self.message)


class ConfigUnexpectedFields(ConfigException):
    """Exception caused by config having unexpected fields"""

    def __init__(self, unexpected_fields, config):
        self.config = config
        self.unexpected_fields = unexpected_fields
        self.message = (
            f"Config has fields '{sorted(config.keys())}', "
            + f"unexpected fields '{sorted(unexpected_fields)}'"
        )
        super().__init__(self.message)


class ConnectFailed(LdapClientException):
    """Raised when the LDAP server can't be reached"""

    def __init__(self, url, cause):
        self.url = url
        self.message = f"Failed to connect to LDAP server at {url}: {cause}"
        super().__init__(self.message)


class BindFailed(LdapClientException):
    """Raised when the binding fails"""

    def __init__(self, bind_dn, cause):
        self.bind_dn = bind_dn
        self.message = f"Failed to bind to LDAP server as '{bind_dn}': {cause}"
        super().__init__(self.message)


class InvalidScope(LdapClientException):
    """Raised for a scope token other than base, one or sub"""

    def __init__(self, token):
        self.token = token
        self.message = f"Invalid scope: {token}"
        super().__init__(self.message)


class SearchFailed(LdapClientException):
    """Raised when a search can't be sent or the server reports an error"""

    def __init__(self, search_filter, cause):
        self.search_filter = search_filter
        self.message = f"LDAP search for '{search_filter}' failed: {cause}"
        super().__init__(self.message)


class InvalidOutputMode(LdapClientException):
    """Raised for an output format other than json or table"""

    def __init__(self, mode):
        self.mode = mode
        self.message = f"Invalid output format: {mode}"
        super().__init__(self.message)


class UnbindFailed(LdapClientException):
    """Raised when the connection can't be unbound cleanly"""

    def __init__(self, cause):
        self.message = f"Failed to unbind from LDAP server: {cause}"
        super().__init__(self.message)


class SessionClosed(LdapClientException):
    """Raised when a session is used after it was closed"""
