"""
Pytest configuration and shared fixtures.
"""

import pytest
import shutil
import subprocess
from pathlib import Path
from unittest.mock import patch

from vorbiscomment.utils import Config

# ---------- Constants ----------

# Enough of an Ogg page header for a file that only has to exist
OGG_HEADER = b'OggS\x00\x02\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00'

FFMPEG = shutil.which("ffmpeg")

# ---------- Helper Functions ----------

def generate_ogg(path: Path):
    """Generate a real, untagged Ogg Vorbis file using ffmpeg."""
    if not FFMPEG:
        raise RuntimeError("ffmpeg not found on PATH")

    cmd = [
        FFMPEG,
        "-f", "lavfi",
        "-i", "sine=frequency=440:duration=1",
        "-ar", "44100",
        "-ac", "2",
        "-c:a", "libvorbis",
        "-map_metadata", "-1",
        str(path),
        "-y",
        "-loglevel", "error",
    ]

    proc = subprocess.run(cmd, capture_output=True)
    if proc.returncode != 0:
        raise RuntimeError(f"ffmpeg failed for .ogg: {proc.stderr.decode()}")

# ---------- Fixtures ----------

@pytest.fixture
def completed():
    """Factory for the object a patched subprocess.run returns."""
    def make(stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0) -> subprocess.CompletedProcess:
        return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)
    return make

@pytest.fixture(autouse=True)
def restore_config():
    """Keep Config changes made by a test from leaking into the next one."""
    saved = (Config.BINARY, Config.TIMEOUT, Config.ENCODING, Config.DEFAULT_VERBOSE)
    yield
    Config.BINARY, Config.TIMEOUT, Config.ENCODING, Config.DEFAULT_VERBOSE = saved

@pytest.fixture
def ogg_file(tmp_path):
    """A dummy .ogg file; enough for tests where the binary is mocked."""
    path = tmp_path / "track.ogg"
    path.write_bytes(OGG_HEADER + b'\x00' * 1024)
    return path

@pytest.fixture
def comment_file(tmp_path):
    """An import file with one name=value per line and a blank line."""
    path = tmp_path / "comments.txt"
    path.write_text("title=Labyrinth\n\nartist=Adam Rogers Quintet\n", encoding="utf-8")
    return path

@pytest.fixture
def fake_run():
    """Patch subprocess.run as seen by the session facade."""
    with patch('vorbiscomment.core.subprocess.run') as run:
        run.return_value = subprocess.CompletedProcess(args=[], returncode=0, stdout=b"", stderr=b"")
        yield run

@pytest.fixture(scope="session")
def ogg_template(tmp_path_factory):
    """Generate a single real Ogg Vorbis file for tests that read or write tags."""
    if not FFMPEG:
        pytest.skip("ffmpeg not found - cannot generate real audio files")

    template_dir = tmp_path_factory.mktemp("template")
    template_file = template_dir / "template.ogg"

    try:
        generate_ogg(template_file)
    except Exception as e:
        pytest.skip(f"Failed to generate audio template: {e}")

    return template_file

@pytest.fixture
def real_ogg(ogg_template, tmp_path):
    """Fresh copy of the real Ogg Vorbis template for one test."""
    path = tmp_path / "real.ogg"
    shutil.copy2(ogg_template, path)
    return path
