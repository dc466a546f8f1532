"""Config reader for ldap_client"""

import glob
import logging
import os
import os.path
import string
from typing import Mapping, Optional

from addict import Dict
import yaml

from . import ConfigException, ConfigMissingFields, ConfigUnexpectedFields
from .models import ConnectionParameters

CONNECTION_FIELDS = ("url", "bind_dn", "password", "base_dn")

DEFAULT_CONFIG = {
    "url": "ldap://localhost:389",
    "bind_dn": "cn=admin,dc=electronicpanopti,dc=com",
    "base_dn": "dc=electronicpanopti,dc=com",
}

ENV_PREFIX = "LDAP_CLIENT_"


def _substitute(value, environ: Mapping[str, str]):
    """Replace ${VAR} references in every string of a loaded yaml document"""
    if isinstance(value, str):
        try:
            return string.Template(value).substitute(**environ)
        except KeyError as exc:
            raise ConfigException(
                f"The environment variable {exc} used in your config file wasn't provided!"
            ) from exc
    if isinstance(value, dict):
        return {key: _substitute(item, environ) for key, item in value.items()}
    if isinstance(value, list):
        return [_substitute(item, environ) for item in value]
    return value


class ConfigReader:
    """Reads a file or folder of yaml configuration files"""

    def __init__(self, file, raw=False, environ: Optional[Mapping[str, str]] = None):
        """Parse the specified file or folder into self.config"""
        self.config = None
        self.config_raw = {}

        if os.path.isdir(file):
            filelist = sorted(glob.glob(os.path.join(file, "*.yml")))
        elif os.path.isfile(file):
            filelist = [file]
        else:
            raise ConfigException(f"Specified config file couldn't be found! {file}")

        for current_file in filelist:
            logging.debug("Reading config from %s", current_file)
            with open(current_file, "r", encoding="utf-8") as config_file:
                try:
                    loaded = yaml.safe_load(config_file) or {}
                except yaml.YAMLError as exc:
                    raise ConfigException(
                        f"Config read failed when parsing {current_file}! Error was: {exc}"
                    ) from exc
            if not isinstance(loaded, dict):
                raise ConfigException(
                    f"Config read failed when parsing {current_file}! "
                    + "Expected a mapping at the top level"
                )
            self.config_raw.update(loaded)

        if raw:
            self.config = Dict(self.config_raw)
        else:
            environ = os.environ if environ is None else environ
            self.config = Dict(_substitute(self.config_raw, environ))

        unexpected_fields = set(self.config.keys()) - set(CONNECTION_FIELDS)
        if unexpected_fields:
            raise ConfigUnexpectedFields(unexpected_fields, self.config)


def from_environment(environ: Mapping[str, str]) -> dict:
    """Pick LDAP_CLIENT_URL, LDAP_CLIENT_BIND_DN etc. out of the environment"""
    found = {}
    for name in CONNECTION_FIELDS:
        value = environ.get(ENV_PREFIX + name.upper())
        if value:
            found[name] = value
    return found


def load_connection_parameters(
    overrides: Mapping[str, Optional[str]],
    config_file: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ConnectionParameters:
    """Merge defaults, config file, environment and command line values

    Later sources win. None values in overrides mean "not given".

    :raises ConfigMissingFields: If nothing supplied a password
    """
    environ = os.environ if environ is None else environ

    config = dict(DEFAULT_CONFIG)
    if config_file:
        config |= ConfigReader(config_file, environ=environ).config.to_dict()
    config |= from_environment(environ)
    config |= {key: value for key, value in overrides.items() if value is not None}

    missing_fields = set(CONNECTION_FIELDS) - {
        key for key, value in config.items() if value
    }
    if missing_fields:
        raise ConfigMissingFields(missing_fields, config)

    return ConnectionParameters(**{name: str(config[name]) for name in CONNECTION_FIELDS})
