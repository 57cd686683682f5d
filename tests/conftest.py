import os

import pytest
from fastapi.testclient import TestClient

from sakuin.config import Settings
from sakuin.main import create_app

# 2001-09-09, far enough back that relative dates are stable
OLD_MTIME = 1_000_000_000

REPORT_BYTES = b"%PDF-1.4\n% not really a pdf\n"


@pytest.fixture
def data_dir(tmp_path):
    """A small data tree, plus a secret file next to (not inside) it."""
    root = tmp_path / "data"
    (root / "a" / "b" / "c").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / "report.pdf").write_bytes(REPORT_BYTES)
    (root / "docs" / "notes.txt").write_text("hello\n")
    (root / ".hidden").write_text("dotfile")
    (tmp_path / "outside.txt").write_text("secret")

    for path in list(root.rglob("*")) + [root]:
        os.utime(path, (OLD_MTIME, OLD_MTIME))
    return root


@pytest.fixture
def settings(data_dir):
    return Settings(data_dir=str(data_dir))


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))


BAD_NAME = b"bad\xffname.txt"
BAD_NAME_BYTES = b"raw bytes\n"


@pytest.fixture
def bad_name_file(data_dir):
    """A child whose on-disk name is not valid UTF-8."""
    try:
        with open(os.path.join(os.fsencode(data_dir), BAD_NAME), "wb") as f:
            f.write(BAD_NAME_BYTES)
    except OSError:
        pytest.skip("filesystem rejects names that are not UTF-8")
    return data_dir / os.fsdecode(BAD_NAME)


@pytest.fixture
def fifo(data_dir):
    if not hasattr(os, "mkfifo"):
        pytest.skip("named pipes are not supported")
    path = data_dir / "pipe"
    os.mkfifo(path)
    return path
