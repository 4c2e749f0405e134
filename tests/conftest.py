import pytest

from gif_streams import sample_gif


@pytest.fixture
def sample_bytes():
    return sample_gif()


@pytest.fixture
def sample_path(tmp_path, sample_bytes):
    path = tmp_path / "sample.gif"
    path.write_bytes(sample_bytes)
    return path
