"""Read administrator identities configured by other polkit fragments."""

from __future__ import annotations

import configparser
import logging
from pathlib import Path

from privilege_enforcement.config import ADSYS_BASE_CONF_NAME, localauthority_dir

logger = logging.getLogger(__name__)

SECTION = "Configuration"
ADMIN_IDENTITIES_KEY = "AdminIdentities"


class PolkitConfigError(RuntimeError):
    """Raised when a foreign polkit fragment cannot be read or parsed."""


def _parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        interpolation=None,
        strict=False,
        inline_comment_prefixes=None,
    )
    # polkit keys are case sensitive
    parser.optionxform = str  # type: ignore[assignment]
    return parser


def read_admin_identities(fragment: Path) -> str:
    """``AdminIdentities`` of a single fragment, empty when the key is unset."""
    parser = _parser()
    try:
        with fragment.open(encoding="utf-8-sig") as handle:
            parser.read_file(handle, source=str(fragment))
    except configparser.MissingSectionHeaderError:
        # keys outside of any section never belong to [Configuration]
        logger.debug("%s has no section header, no administrators configured", fragment)
        return ""
    except (OSError, UnicodeDecodeError, configparser.Error) as exc:
        raise PolkitConfigError(f"Failed to parse polkit fragment {fragment}: {exc}") from exc
    return parser.get(SECTION, ADMIN_IDENTITIES_KEY, fallback="")


def system_admin_identities(policykit_dir: Path | str) -> str:
    """Return the ``AdminIdentities`` value in effect outside of our own fragment.

    Fragments under ``localauthority.conf.d`` are layered in ascending file name
    order, so the last qualifying fragment wins. A missing directory yields an
    empty value.
    """
    conf_dir = localauthority_dir(Path(policykit_dir))
    own_fragment = f"{ADSYS_BASE_CONF_NAME}.conf"

    admin_identities = ""
    for fragment in sorted(conf_dir.glob("*.conf")):
        if fragment.is_dir():
            logger.warning("%s is a directory. Ignoring.", fragment)
            continue
        if fragment.name == own_fragment:
            continue
        try:
            admin_identities = read_admin_identities(fragment)
        except PolkitConfigError as exc:
            raise PolkitConfigError(
                f"Can't get existing system polkit administrators in {policykit_dir}: {exc}"
            ) from exc

    return admin_identities
