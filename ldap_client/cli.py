"""ldap-client main file"""

import argparse
import logging
import sys

from . import LdapClientException, UnbindFailed
from .config_reader import DEFAULT_CONFIG, ENV_PREFIX, load_connection_parameters
from .formatter import NO_ENTRIES, OUTPUT_MODES, check_output_mode, render
from .models import ConnectionParameters, SearchRequest
from .resolver import SCOPE_TOKENS, build_request
from .search import describe_request, preset_request, search
from .session import session_scope


def _add_output_argument(parser):
    parser.add_argument(
        "-o",
        "--output",
        help=f"output format ({', '.join(OUTPUT_MODES)})",
        default="table",
    )


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="ldap-client",
        description="Search an LDAP directory and print what it finds.",
    )
    parser.add_argument(
        "-u",
        "--url",
        help=f"LDAP server URL (default {DEFAULT_CONFIG['url']})",
    )
    parser.add_argument(
        "-b",
        "--bind-dn",
        help=f"bind DN for authentication (default {DEFAULT_CONFIG['bind_dn']})",
    )
    parser.add_argument(
        "-p",
        "--password",
        help=f"password for authentication, or set {ENV_PREFIX}PASSWORD",
    )
    parser.add_argument(
        "--base-dn",
        help=f"base DN for searches (default {DEFAULT_CONFIG['base_dn']})",
    )
    parser.add_argument(
        "-c",
        "--config",
        help="config file location.  Either a single file or a folder of yaml files.",
    )
    parser.add_argument(
        "-d",
        "--debug",
        help="enable debug mode",
        action="store_true",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser(
        "search", help="Search for entries in the LDAP directory"
    )
    search_parser.add_argument(
        "-f",
        "--filter",
        help='LDAP filter, e.g. "(objectClass=*)" or "(cn=john*)"',
        default="(objectClass=*)",
    )
    search_parser.add_argument(
        "-a",
        "--attributes",
        help="attributes to retrieve, comma separated (default all)",
    )
    search_parser.add_argument(
        "-s",
        "--scope",
        help=f"search scope ({', '.join(SCOPE_TOKENS)})",
        default="sub",
    )
    _add_output_argument(search_parser)

    _add_output_argument(subparsers.add_parser("users", help="List all users"))
    _add_output_argument(subparsers.add_parser("groups", help="List all groups"))
    subparsers.add_parser("test", help="Test connection to the LDAP server")

    return parser.parse_args(argv)


def run_search(params: ConnectionParameters, request: SearchRequest, output: str):
    """Bind, search, print the results, unbind"""
    check_output_mode(output)
    with session_scope(params) as session:
        for line in describe_request(request):
            print(line)
        entries = search(session, request)
        if entries:
            print(render(entries, output))
        else:
            print(NO_ENTRIES)


def search_command(args, params: ConnectionParameters):
    """The 'search' subcommand"""
    request = build_request(params.base_dn, args.scope, args.filter, args.attributes)
    run_search(params, request, args.output)


def preset_command(args, params: ConnectionParameters):
    """The 'users' and 'groups' subcommands"""
    run_search(params, preset_request(args.command, params.base_dn), args.output)


def connection_test_command(args, params: ConnectionParameters):
    """The 'test' subcommand"""
    # pylint: disable=unused-argument
    print("Testing connection to LDAP server...")
    print(f"URL: {params.url}")
    print(f"Bind DN: {params.bind_dn}")

    with session_scope(params) as session:
        entries = search(session, preset_request("test", params.base_dn))
        print("✓ Connection test successful!")
        print(f"✓ Found {len(entries)} base entries")


COMMANDS = {
    "search": search_command,
    "users": preset_command,
    "groups": preset_command,
    "test": connection_test_command,
}


def main(argv=None):
    """Entry point for the ldap-client cli"""
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    try:
        params = load_connection_parameters(
            {
                "url": args.url,
                "bind_dn": args.bind_dn,
                "password": args.password,
                "base_dn": args.base_dn,
            },
            args.config,
        )
        COMMANDS[args.command](args, params)
    except UnbindFailed as exc:
        # Results are already out, this is only cleanup
        logging.warning("%s", exc)
    except LdapClientException as exc:
        logging.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
