"""Commit compiled policies to the sudoers and polkit directories."""

from __future__ import annotations

import errno
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple

from privilege_enforcement.compiler import CompiledPolicy
from privilege_enforcement.config import DIR_MODE, POLKIT_FILE_MODE, SUDOERS_FILE_MODE

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".new"


class CommitError(OSError):
    """Raised when a policy file cannot be written, renamed or removed."""


class Filesystem(ABC):
    """Side effects the writer needs from the host."""

    @abstractmethod
    def makedirs(self, path: Path, mode: int) -> None:
        ...

    @abstractmethod
    def write(self, path: Path, content: str, mode: int) -> None:
        ...

    @abstractmethod
    def rename(self, src: Path, dst: Path) -> None:
        ...

    @abstractmethod
    def remove(self, path: Path) -> None:
        """Remove ``path``, a missing file is not an error."""


class LocalFilesystem(Filesystem):
    def makedirs(self, path: Path, mode: int) -> None:
        path.mkdir(mode=mode, parents=True, exist_ok=True)

    def write(self, path: Path, content: str, mode: int) -> None:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        try:
            # a stale temporary file keeps its old mode otherwise
            os.fchmod(fd, mode)
            os.write(fd, content.encode("utf-8"))
            os.fsync(fd)
        finally:
            os.close(fd)

    def rename(self, src: Path, dst: Path) -> None:
        os.replace(src, dst)

    def remove(self, path: Path) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            return


def _temp_path(path: Path) -> Path:
    return path.with_name(path.name + TEMP_SUFFIX)


def _fail(operation: str, path: Path, exc: OSError) -> CommitError:
    return CommitError(exc.errno or errno.EIO, f"can't {operation}: {exc.strerror or exc}", str(path))


def remove_all(paths: List[Path], fs: Filesystem) -> None:
    for path in paths:
        try:
            fs.remove(path)
        except OSError as exc:
            raise _fail("remove policy file", path, exc) from exc
        logger.debug("Removed %s if present", path)


def _stage(temp: Path, content: str, mode: int, fs: Filesystem) -> None:
    try:
        fs.makedirs(temp.parent, DIR_MODE)
    except OSError as exc:
        raise _fail("create directory", temp.parent, exc) from exc

    try:
        fs.write(temp, content, mode)
    except OSError as exc:
        raise _fail("write temporary file", temp, exc) from exc


def _discard(temps: List[Path], fs: Filesystem) -> None:
    for temp in temps:
        try:
            fs.remove(temp)
        except OSError as exc:
            logger.warning("Couldn't remove temporary file %s: %s", temp, exc)


def commit(
    policy: Optional[CompiledPolicy],
    sudoers_conf: Path,
    polkit_conf: Path,
    fs: Optional[Filesystem] = None,
) -> None:
    """Write ``policy`` to its two targets, each replaced atomically.

    ``None`` means no entries were configured and removes both targets. The
    polkit target is removed as well when the policy does not override the
    system administrators. Both temporary files are fully written before the
    first rename, but the two renames are not a single transaction.
    """
    fs = fs or LocalFilesystem()
    if policy is None:
        remove_all([sudoers_conf, polkit_conf], fs)
        return

    targets: List[Tuple[Path, str, int]] = [(sudoers_conf, policy.sudoers_content(), SUDOERS_FILE_MODE)]
    polkit_content = policy.polkit_content()
    if polkit_content is not None:
        targets.append((polkit_conf, polkit_content, POLKIT_FILE_MODE))

    staged: List[Tuple[Path, Path]] = []
    try:
        for final, content, mode in targets:
            temp = _temp_path(final)
            staged.append((temp, final))
            _stage(temp, content, mode, fs)
    except CommitError:
        # nothing was renamed yet, leave no policy copies behind
        _discard([temp for temp, _ in staged], fs)
        raise

    for temp, final in staged:
        try:
            fs.rename(temp, final)
        except OSError as exc:
            raise _fail("rename temporary file", final, exc) from exc
        logger.info("Updated %s", final)

    if polkit_content is None:
        remove_all([polkit_conf], fs)
