"""Apply privilege policies to the host.

Privilege escalation is allowed or denied by overriding distribution defaults
in two files: a sudoers drop-in and a polkit local authority fragment. This is
all or nothing, like the sudo policy files of most default distribution setups.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Iterable, List, Optional

from privilege_enforcement import config, polkit, writer
from privilege_enforcement.compiler import CompiledPolicy, compile_policy
from privilege_enforcement.entries import PolicyEntry

logger = logging.getLogger(__name__)

LOCK_POLL_SECONDS = 0.1


class PrivilegePolicyError(RuntimeError):
    """Raised when a privilege policy could not be applied."""


class PolicyCancelledError(PrivilegePolicyError):
    """Raised when a caller cancelled before the policy lock was acquired."""


class PrivilegeManager:
    """Serializes privilege policy applications for one pair of directories."""

    def __init__(
        self,
        sudoers_dir: str | None = None,
        policykit_dir: str | None = None,
        fs: Optional[writer.Filesystem] = None,
    ) -> None:
        self.sudoers_dir, self.policykit_dir = config.resolve_dirs(sudoers_dir, policykit_dir)
        self.sudoers_conf = config.sudoers_conf_path(self.sudoers_dir)
        self.polkit_conf = config.polkit_conf_path(self.policykit_dir)
        self.fs = fs or writer.LocalFilesystem()
        self._lock = threading.Lock()

    def _acquire(self, cancel: Optional[threading.Event]) -> None:
        if cancel is None:
            self._lock.acquire()
            return
        while not self._lock.acquire(timeout=LOCK_POLL_SECONDS):
            if cancel.is_set():
                raise PolicyCancelledError("Privilege policy application cancelled")
        if cancel.is_set():
            self._lock.release()
            raise PolicyCancelledError("Privilege policy application cancelled")

    def _compile(self, entries: List[PolicyEntry]) -> Optional[CompiledPolicy]:
        # no entries, no policy: nothing to read from the system either
        if not entries:
            return None
        system_admins = polkit.system_admin_identities(self.policykit_dir)
        return compile_policy(entries, system_admins)

    def preview(self, entries: Iterable[PolicyEntry]) -> Optional[CompiledPolicy]:
        """Compile ``entries`` against the current system without writing anything."""
        with self._lock:
            return self._compile(list(entries))

    def apply_policy(
        self,
        object_name: str,
        is_computer: bool,
        entries: Iterable[PolicyEntry],
        cancel: Optional[threading.Event] = None,
    ) -> Optional[CompiledPolicy]:
        """Compile and commit ``entries``, returning the policy that was written.

        ``None`` is returned for user objects and when there are no entries.
        """
        # privilege escalation only exists for computers
        if not is_computer:
            return None

        self._acquire(cancel)
        try:
            logger.debug("Applying privilege policy to %s", object_name)
            policy = self._compile(list(entries))
            writer.commit(policy, self.sudoers_conf, self.polkit_conf, self.fs)
            return policy
        except (OSError, polkit.PolkitConfigError) as exc:
            raise PrivilegePolicyError(f"can't apply privilege policy to {object_name}: {exc}") from exc
        finally:
            self._lock.release()

    def targets(self) -> List[Path]:
        return [self.sudoers_conf, self.polkit_conf]
