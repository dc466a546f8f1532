""" ldap_client data models """

from dataclasses import dataclass, field
import enum
import types
from typing import Mapping, Tuple

import ldap3


class Scope(enum.Enum):
    """Breadth of a search relative to its base DN"""

    BASE = ldap3.BASE
    ONELEVEL = ldap3.LEVEL
    SUBTREE = ldap3.SUBTREE


@dataclass(frozen=True)
class ConnectionParameters:
    """Where and as whom to connect"""

    url: str
    bind_dn: str
    password: str = field(repr=False)
    base_dn: str


@dataclass(frozen=True)
class SearchRequest:
    """internal representation of a single search operation"""

    base_dn: str
    scope: Scope
    search_filter: str
    attributes: Tuple[str, ...] = (ldap3.ALL_ATTRIBUTES,)

    def __post_init__(self):
        object.__setattr__(self, "attributes", tuple(self.attributes))


@dataclass(frozen=True)
class ResultEntry:
    """internal representation of a directory entry returned by a search

    Every attribute maps to a tuple of at least one value, in the order
    the server sent them.
    """

    dn: str
    attributes: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self):
        attributes = {}
        for name, values in self.attributes.items():
            values = tuple(values)
            if not values:
                raise ValueError(f"Attribute '{name}' of '{self.dn}' has no values")
            attributes[name] = values
        object.__setattr__(self, "attributes", types.MappingProxyType(attributes))
