import json
import logging

import pytest

from gifmetadata.cli import main

from gif_streams import comment_extension, gif


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger("gifmetadata")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def write_gif(tmp_path):
    def write(data, name="image.gif"):
        path = tmp_path / name
        path.write_bytes(data)
        return path
    return write


def test_prints_extensions(sample_path, capsys):
    assert main([str(sample_path)]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "application: NETSCAPE2.0",
        "- \x01",
        "comment: Copyright 1996 Example Corp.",
        "plain text: Hello, world",
        "comment: second frame",
    ]


def test_verbose(sample_path, sample_bytes, capsys):
    assert main(["-v", str(sample_path)]) == 0
    out = capsys.readouterr().out
    assert f"[verbose] opened file '{sample_path}'" in out
    assert f"[verbose] file size: {len(sample_bytes)} bytes" in out
    assert "[verbose] gif is version 89a" in out
    assert "[verbose] canvas width: 4" in out
    assert "[verbose] canvas height: 4" in out
    assert "[dev]" not in out


def test_dev(sample_path, capsys):
    assert main(["--dev", str(sample_path)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("[dev] dev flag active\n")
    assert "[dev] entering state: searching" in out
    assert "[dev] found the trailer" in out
    assert "comment: second frame" in out


def test_missing_trailer_warning(write_gif, capsys):
    path = write_gif(gif(comment_extension(b'cut short'), trailer=False))
    assert main([str(path)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "comment: cut short"
    assert lines[1].startswith("[warning] file was incompatible")


def test_unknown_bytes_only_shown_when_verbose(write_gif, capsys):
    path = write_gif(gif(b'\x10\x11'))
    assert main([str(path)]) == 0
    assert "[warning]" not in capsys.readouterr().out
    assert main(["-v", str(path)]) == 0
    assert "[warning] skipped 2 unknown byte(s)" in capsys.readouterr().out


def test_wrong_signature(write_gif, capsys):
    path = write_gif(b'\x89PNG\r\n\x1a\n' + bytes(32), name="image.png")
    assert main([str(path)]) == 1
    assert capsys.readouterr().out == "[error] file does not appear to be a gif (wrong sig)\n"


def test_too_small(write_gif, capsys):
    path = write_gif(b'GIF')
    assert main([str(path)]) == 1
    assert "(too small)" in capsys.readouterr().out


def test_missing_file(tmp_path, capsys):
    path = tmp_path / "nope.gif"
    assert main([str(path)]) == 1
    assert capsys.readouterr().out == f"[error] file '{path}' cannot be accessed\n"


def test_json_output(sample_path, capsys):
    assert main(["--json", str(sample_path)]) == 0
    metadata = json.loads(capsys.readouterr().out)
    assert metadata['GIF:Comment'] == ['Copyright 1996 Example Corp.', 'second frame']
    assert metadata['GIF:FrameCount'] == 2


def test_csv_output(sample_path, capsys):
    assert main(["--csv", str(sample_path)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Tag,Value"
    assert '"GIF:PlainText","Hello, world"' in lines


def test_verbose_json_keeps_stdout_parseable(sample_path, capsys):
    assert main(["-v", "--json", str(sample_path)]) == 0
    captured = capsys.readouterr()
    assert json.loads(captured.out)['GIF:GIFVersion'] == '89a'
    assert "[verbose] gif is version 89a" in captured.err
    assert "[verbose] canvas width: 4" in captured.err


def test_dev_csv_keeps_stdout_parseable(sample_path, capsys):
    assert main(["-d", "--csv", str(sample_path)]) == 0
    captured = capsys.readouterr()
    assert captured.out.splitlines()[0] == "Tag,Value"
    assert "[dev]" not in captured.out
    assert captured.err.startswith("[dev] dev flag active\n")


def test_json_output_for_non_gif(write_gif, capsys):
    path = write_gif(b'not a gif at all')
    assert main(["--json", str(path)]) == 1
    assert "wrong sig" in capsys.readouterr().out


def test_strict_stops_at_trailer(write_gif, capsys):
    path = write_gif(gif(comment_extension(b'in')) + comment_extension(b'out'))
    assert main(["--strict", str(path)]) == 0
    assert capsys.readouterr().out.splitlines() == ["comment: in"]


@pytest.mark.parametrize("chunk_size", ["1", "3", "4096"])
def test_chunk_size(sample_path, capsys, chunk_size):
    assert main(["--chunk-size", chunk_size, str(sample_path)]) == 0
    assert "comment: second frame" in capsys.readouterr().out


def test_bad_chunk_size(sample_path, capsys):
    assert main(["--chunk-size", "0", str(sample_path)]) == 1
    assert "[error] chunk_size must be positive" in capsys.readouterr().out


def test_requires_a_file(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2
