import os
import sys
from pathlib import Path

import pytest

# Qt widgets need a platform plugin; tests never open a real display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add project root to path
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


def write_tree(root: Path, files: dict) -> Path:
    """Create ``files`` (relative path -> str or bytes) under ``root``."""
    root.mkdir(parents=True, exist_ok=True)
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))
    return root


@pytest.fixture
def make_tree(tmp_path):
    """Factory building a directory tree under tmp_path."""
    def _make(name: str, files: dict) -> Path:
        return write_tree(tmp_path / name, files)
    return _make


@pytest.fixture
def scenario_roots(make_tree):
    """A: x.txt, y.txt; B: y.txt, z.txt."""
    root_a = make_tree("a", {"x.txt": "hello", "y.txt": "same"})
    root_b = make_tree("b", {"y.txt": "same", "z.txt": "new"})
    return root_a, root_b


@pytest.fixture
def mixed_roots(make_tree):
    """Trees with every classification and a nested directory."""
    root_a = make_tree("a", {
        "keep.txt": "unchanged",
        "edit.txt": "v1",
        "gone.txt": "bye",
        "src/main.py": "print('a')\n",
    })
    root_b = make_tree("b", {
        "keep.txt": "unchanged",
        "edit.txt": "v2",
        "new.txt": "hi",
        "src/main.py": "print('a')\n",
    })
    return root_a, root_b


@pytest.fixture(scope="session")
def qapp():
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def undecodable_roots(make_tree):
    """Trees sharing a file whose name is not valid UTF-8 (Linux only)."""
    if sys.platform != "linux":
        pytest.skip("needs a file system that accepts arbitrary name bytes")
    root_a = make_tree("a", {"plain.txt": "same"})
    root_b = make_tree("b", {"plain.txt": "same"})
    for root, content in ((root_a, b"v1"), (root_b, b"v2")):
        with open(os.path.join(os.fsencode(root), b"caf\xe9.txt"), "wb") as f:
            f.write(content)
    return root_a, root_b
