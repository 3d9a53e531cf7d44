"""Compile policy entries into sudoers rules and polkit administrator identities.

Entries are folded in order into an immutable state. ``allow-local-admins``
toggles the distribution administrator groups, ``client-admins`` grants full
sudo rights to the listed users and groups and makes them polkit
administrators. Unknown keys are ignored.

The polkit ``AdminIdentities`` key overrides whatever the system configured,
so it is only emitted when something changes: local administrators are
revoked, or client administrators were granted. In the latter case the
system administrators are kept in front of ours.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from functools import reduce
from typing import Iterable, Tuple

from privilege_enforcement import identities
from privilege_enforcement.entries import EntryKey, PolicyEntry

HEADER = """# This file is managed by adsys.
# Do not edit this file manually.
# Any changes will be overwritten.

"""

LOCAL_ADMIN_DENY_RULES = (
    "%admin\tALL=(ALL) !ALL",
    "%sudo\tALL=(ALL:ALL) !ALL",
)

GRANT_RULE = '"{identity}"\tALL=(ALL:ALL) ALL'


@dataclass(frozen=True)
class CompiledPolicy:
    escalation_rules: Tuple[str, ...]
    authorized_admins: str | None

    def sudoers_content(self) -> str:
        return HEADER + "".join(line + "\n" for line in self.escalation_rules)

    def polkit_content(self) -> str | None:
        if self.authorized_admins is None:
            return None
        return f"{HEADER}[Configuration]\nAdminIdentities={self.authorized_admins}\n"


@dataclass(frozen=True)
class _State:
    allow_local_admins: bool = True
    rules: Tuple[str, ...] = ()
    # None until a client-admins entry granted someone
    polkit_identities: Tuple[str, ...] | None = None


def _with_block(state: _State, lines: Iterable[str]) -> _State:
    # every contributing entry is followed by a blank line
    return replace(state, rules=state.rules + tuple(lines) + ("",))


def _apply_entry(state: _State, entry: PolicyEntry) -> _State:
    kind = entry.kind
    if kind is EntryKey.ALLOW_LOCAL_ADMINS:
        state = replace(state, allow_local_admins=not entry.disabled)
        if state.allow_local_admins:
            return state
        return _with_block(state, LOCAL_ADMIN_DENY_RULES)

    if kind is EntryKey.CLIENT_ADMINS:
        if entry.disabled:
            return state
        granted = identities.normalize(entry.value)
        if not granted:
            return state
        state = _with_block(state, (GRANT_RULE.format(identity=identity) for identity in granted))
        return replace(state, polkit_identities=tuple(identities.polkit_identity(i) for i in granted))

    return state


def _authorized_admins(state: _State, system_admins: str) -> str | None:
    if state.allow_local_admins and state.polkit_identities is None:
        return None

    users = ";".join(state.polkit_identities or ())
    if not state.allow_local_admins:
        return users
    # AdminIdentities replaces the system value, keep local admins in
    if system_admins:
        return f"{system_admins};{users}"
    return users


def compile_policy(entries: Iterable[PolicyEntry], system_admins: str = "") -> CompiledPolicy:
    state = reduce(_apply_entry, entries, _State())
    return CompiledPolicy(
        escalation_rules=state.rules,
        authorized_admins=_authorized_admins(state, system_admins),
    )
