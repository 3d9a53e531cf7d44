"""Default locations and environment overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Tuple

DEFAULT_SUDOERS_DIR = "/etc/sudoers.d"
DEFAULT_POLICYKIT_DIR = "/etc/polkit-1"

# Shared by the sudoers drop-in and the polkit fragment so our own previous
# output can be recognized among foreign fragments.
ADSYS_BASE_CONF_NAME = "99-adsys-privilege-enforcement"
LOCALAUTHORITY_SUBDIR = "localauthority.conf.d"

SUDOERS_DIR_ENV = "PRIVILEGE_ENFORCEMENT_SUDOERS_DIR"
POLICYKIT_DIR_ENV = "PRIVILEGE_ENFORCEMENT_POLICYKIT_DIR"

SUDOERS_FILE_MODE = 0o600
POLKIT_FILE_MODE = 0o644
DIR_MODE = 0o755


def env_dirs(environ: Mapping[str, str] | None = None) -> Tuple[str | None, str | None]:
    """Directory overrides from the environment, ``None`` when unset or empty."""
    env = os.environ if environ is None else environ
    return env.get(SUDOERS_DIR_ENV) or None, env.get(POLICYKIT_DIR_ENV) or None


def resolve_dirs(sudoers_dir: str | None = None, policykit_dir: str | None = None) -> Tuple[Path, Path]:
    return Path(sudoers_dir or DEFAULT_SUDOERS_DIR), Path(policykit_dir or DEFAULT_POLICYKIT_DIR)


def localauthority_dir(policykit_dir: Path) -> Path:
    return policykit_dir / LOCALAUTHORITY_SUBDIR


def sudoers_conf_path(sudoers_dir: Path) -> Path:
    return sudoers_dir / ADSYS_BASE_CONF_NAME


def polkit_conf_path(policykit_dir: Path) -> Path:
    return localauthority_dir(policykit_dir) / f"{ADSYS_BASE_CONF_NAME}.conf"
