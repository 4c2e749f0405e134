import json

import pytest

from gifmetadata.events import ExtensionEvent, ExtensionKind, ParseWarning, WarningKind
from gifmetadata.formatting import (
    display_text,
    format_output,
    format_warning,
    render_extension,
    render_extensions,
)


@pytest.mark.parametrize("kind,text,line", [
    (ExtensionKind.COMMENT, b'hello', 'comment: hello'),
    (ExtensionKind.APPLICATION, b'NETSCAPE2.0', 'application: NETSCAPE2.0'),
    (ExtensionKind.APPLICATION_SUBBLOCK, b'\x01\x02', '- \x01\x02'),
    (ExtensionKind.PLAIN_TEXT, b'on screen', 'plain text: on screen'),
])
def test_render_extension(kind, text, line):
    assert render_extension(ExtensionEvent(kind, text)) == line


def test_render_unknown_kind():
    with pytest.raises(ValueError):
        render_extension(ExtensionEvent(ExtensionKind.UNKNOWN, b''))


def test_display_text_stops_at_null():
    assert display_text(b'\x01\x00\x00') == '\x01'
    assert display_text(b'\x00abc') == ''


def test_display_text_is_latin1():
    assert display_text(b'caf\xe9 \xa9 1996') == 'café © 1996'


def test_render_extensions():
    events = [
        ExtensionEvent(ExtensionKind.APPLICATION, b'NETSCAPE2.0'),
        ExtensionEvent(ExtensionKind.APPLICATION_SUBBLOCK, b'\x01\x00\x00'),
        ExtensionEvent(ExtensionKind.COMMENT, b'hi'),
    ]
    assert render_extensions(events) == "application: NETSCAPE2.0\n- \x01\ncomment: hi"


def test_format_warning():
    warning = ParseWarning(WarningKind.UNSUPPORTED_VERSION, "gif is an unsupported version: 90a", 3)
    assert format_warning(warning) == "[warning] gif is an unsupported version: 90a"


METADATA = {
    'GIF:GIFVersion': '89a',
    'GIF:Comment': ['one', 'say "two"'],
    'GIF:ImageWidth': 4,
}


def test_format_text():
    assert format_output(METADATA).splitlines() == [
        'GIF:Comment: one; say "two"',
        'GIF:GIFVersion: 89a',
        'GIF:ImageWidth: 4',
    ]


def test_format_json():
    assert json.loads(format_output(METADATA, "json")) == METADATA


def test_format_csv():
    assert format_output(METADATA, "csv").splitlines() == [
        'Tag,Value',
        '"GIF:Comment","one; say ""two"""',
        '"GIF:GIFVersion","89a"',
        '"GIF:ImageWidth","4"',
    ]


def test_format_unknown_type():
    with pytest.raises(ValueError):
        format_output(METADATA, "xml")
