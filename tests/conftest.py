import sys

import pytest

from .repo_root import REPO_ROOT

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def document():
    from mes_backend.navigation import build_page_document

    return build_page_document()


@pytest.fixture
def history(document):
    from mes_backend.navigation import MemoryHistory

    return MemoryHistory(document)


@pytest.fixture
def storage():
    from mes_backend.navigation import MemoryStorage

    return MemoryStorage()


@pytest.fixture
def scheduler():
    from mes_backend.navigation import ManualScheduler

    return ManualScheduler()


@pytest.fixture
def controller(document, history, storage, scheduler):
    from mes_backend.navigation import PageController

    return PageController(document, history, storage, scheduler)


@pytest.fixture
def site_root(tmp_path):
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_text("<!DOCTYPE html><title>shell</title>", encoding="utf-8")
    (root / "styles.css").write_text("body { margin: 0; }", encoding="utf-8")
    (root / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    (root / "about.html").write_text("<p>about</p>", encoding="utf-8")
    (root / ".env").write_text("SECRET=1", encoding="utf-8")
    return root
