# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Output formatting

Renders extension events in the line format existing gifmetadata tooling
greps for:

    comment: <text>
    application: <identifier><auth code>
    - <sub-block>
    plain text: <text>

and metadata dictionaries as text, JSON or CSV.

Copyright 2025 DNAi inc.
"""

import json
from typing import Any, Dict, Iterable, List

from gifmetadata.events import ExtensionEvent, ExtensionKind, ParseWarning


LINE_PREFIXES = {
    ExtensionKind.COMMENT: "comment: ",
    ExtensionKind.APPLICATION: "application: ",
    ExtensionKind.APPLICATION_SUBBLOCK: "- ",
    ExtensionKind.PLAIN_TEXT: "plain text: ",
}

FORMAT_TYPES = ("text", "json", "csv")


def display_text(text: bytes) -> str:
    """
    Decode extension bytes for display.

    Text is shown up to its first null byte and decoded as Latin-1, so
    every byte maps to exactly one character.
    """
    return text.split(b'\x00', 1)[0].decode('latin-1')


def render_extension(event: ExtensionEvent) -> str:
    """Render one extension event as a single output line."""
    prefix = LINE_PREFIXES.get(event.kind)
    if prefix is None:
        raise ValueError(f"no output format for extension kind {event.kind.value!r}")
    return prefix + display_text(event.text)


def render_extensions(events: Iterable[ExtensionEvent]) -> str:
    return "\n".join(render_extension(event) for event in events)


def format_warning(warning: ParseWarning) -> str:
    return f"[warning] {warning.message}"


def _value_to_text(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return "; ".join(str(v) for v in value)
    return str(value)


def format_output(metadata: Dict[str, Any], format_type: str = "text") -> str:
    """
    Format metadata output based on format type.

    Args:
        metadata: Dictionary of metadata
        format_type: Output format ('text', 'json', 'csv')

    Returns:
        Formatted output string
    """
    if format_type not in FORMAT_TYPES:
        raise ValueError(f"unknown format type: {format_type}")

    if format_type == "json":
        return json.dumps(metadata, indent=2, ensure_ascii=False)
    elif format_type == "csv":
        lines: List[str] = ["Tag,Value"]
        for tag, value in sorted(metadata.items()):
            # Escape quotes in CSV
            value_str = _value_to_text(value).replace('"', '""')
            lines.append(f'"{tag}","{value_str}"')
        return "\n".join(lines)
    else:
        lines = []
        for tag, value in sorted(metadata.items()):
            lines.append(f"{tag}: {_value_to_text(value)}")
        return "\n".join(lines)
