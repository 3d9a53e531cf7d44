from pathlib import Path
from typing import Dict, List, Set, Tuple

import pytest

from privilege_enforcement.writer import Filesystem


class MemoryFilesystem(Filesystem):
    """In-memory stand-in recording every side effect the writer requests."""

    def __init__(self) -> None:
        self.files: Dict[Path, Tuple[str, int]] = {}
        self.dirs: Set[Path] = set()
        self.calls: List[Tuple[str, ...]] = []
        self.fail_on: Set[Tuple[str, Path]] = set()

    def _check(self, operation: str, path: Path) -> None:
        if (operation, path) in self.fail_on:
            raise PermissionError(13, "Permission denied", str(path))

    def makedirs(self, path: Path, mode: int) -> None:
        self.calls.append(("makedirs", str(path), oct(mode)))
        self._check("makedirs", path)
        self.dirs.add(path)

    def write(self, path: Path, content: str, mode: int) -> None:
        self.calls.append(("write", str(path), oct(mode)))
        self._check("write", path)
        if path.parent not in self.dirs:
            raise FileNotFoundError(2, "No such file or directory", str(path))
        self.files[path] = (content, mode)

    def rename(self, src: Path, dst: Path) -> None:
        self.calls.append(("rename", str(src), str(dst)))
        self._check("rename", dst)
        self.files[dst] = self.files.pop(src)

    def remove(self, path: Path) -> None:
        self.calls.append(("remove", str(path)))
        self._check("remove", path)
        self.files.pop(path, None)


@pytest.fixture
def memfs() -> MemoryFilesystem:
    return MemoryFilesystem()


@pytest.fixture
def policykit_dir(tmp_path: Path) -> Path:
    path = tmp_path / "polkit-1"
    (path / "localauthority.conf.d").mkdir(parents=True)
    return path


@pytest.fixture
def sudoers_dir(tmp_path: Path) -> Path:
    return tmp_path / "sudoers.d"
