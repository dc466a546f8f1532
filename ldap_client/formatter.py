"""Renders search results as text"""

import json
from typing import Iterable, List

from . import InvalidOutputMode
from .models import ResultEntry

OUTPUT_MODES = ("json", "table")
NO_ENTRIES = "No entries found."


def render_json(entries: List[ResultEntry]) -> str:
    """Pretty printed JSON array of {dn, attributes} objects"""
    return json.dumps(
        [
            {
                "dn": entry.dn,
                "attributes": {
                    name: list(values) for name, values in entry.attributes.items()
                },
            }
            for entry in entries
        ],
        indent=2,
        ensure_ascii=False,
    )


def _table_lines(entries: List[ResultEntry]) -> Iterable[str]:
    yield f"Found {len(entries)} entries:"
    yield "=" * 80
    for index, entry in enumerate(entries, start=1):
        yield f"Entry #{index}: {entry.dn}"
        yield "-" * 40
        for name, values in entry.attributes.items():
            if len(values) == 1:
                yield f"  {name}: {values[0]}"
            else:
                yield f"  {name}:"
                for value in values:
                    yield f"    - {value}"
        yield ""


def render_table(entries: List[ResultEntry]) -> str:
    """Human readable blocks, one per entry"""
    if not entries:
        return NO_ENTRIES
    return "\n".join(_table_lines(entries))


RENDERERS = {
    "json": render_json,
    "table": render_table,
}


def check_output_mode(mode: str):
    """:raises InvalidOutputMode: If mode is neither json nor table"""
    if mode not in RENDERERS:
        raise InvalidOutputMode(mode)


def render(entries: List[ResultEntry], mode: str) -> str:
    """Render entries in the given output mode

    :raises InvalidOutputMode: If mode is neither json nor table
    """
    check_output_mode(mode)
    return RENDERERS[mode](list(entries))
