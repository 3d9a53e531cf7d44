from privilege_enforcement.compiler import HEADER, compile_policy
from privilege_enforcement.entries import PolicyEntry

DENY = ["%admin\tALL=(ALL) !ALL", "%sudo\tALL=(ALL:ALL) !ALL", ""]


def _allow(disabled: bool) -> PolicyEntry:
    return PolicyEntry(key="allow-local-admins", disabled=disabled)


def _admins(value: str, disabled: bool = False) -> PolicyEntry:
    return PolicyEntry(key="client-admins", value=value, disabled=disabled)


def test_allowed_local_admins_keep_system_defaults():
    policy = compile_policy([_allow(False)], "unix-group:sudo")

    assert policy.escalation_rules == ()
    assert policy.authorized_admins is None
    assert policy.sudoers_content() == HEADER
    assert policy.polkit_content() is None


def test_denied_local_admins_write_deny_rules_and_drop_system_admins():
    policy = compile_policy([_allow(True)], "unix-group:sudo;unix-group:admin")

    assert list(policy.escalation_rules) == DENY
    assert policy.authorized_admins == ""
    assert policy.sudoers_content() == HEADER + "%admin\tALL=(ALL) !ALL\n%sudo\tALL=(ALL:ALL) !ALL\n\n"
    assert policy.polkit_content() == HEADER + "[Configuration]\nAdminIdentities=\n"


def test_client_admins_are_merged_after_system_admins():
    policy = compile_policy([_admins("bob")], "unix-user:alice")

    assert list(policy.escalation_rules) == ['"bob"\tALL=(ALL:ALL) ALL', ""]
    assert policy.authorized_admins == "unix-user:alice;unix-user:bob"


def test_client_admins_without_system_admins_have_no_leading_separator():
    policy = compile_policy([_admins("bob,%ops")])

    assert policy.authorized_admins == "unix-user:bob;unix-group:ops"


def test_client_admins_with_denied_local_admins_are_alone():
    policy = compile_policy([_allow(True), _admins("EXAMPLE\\bob\n%sales")], "unix-user:alice")

    assert list(policy.escalation_rules) == DENY + [
        '"bob@EXAMPLE"\tALL=(ALL:ALL) ALL',
        '"%sales"\tALL=(ALL:ALL) ALL',
        "",
    ]
    assert policy.authorized_admins == "unix-user:bob@EXAMPLE;unix-group:sales"


def test_last_allow_local_admins_entry_wins_but_rules_accumulate():
    policy = compile_policy([_allow(True), _allow(False), _admins("bob")], "unix-group:sudo")

    assert list(policy.escalation_rules) == DENY + ['"bob"\tALL=(ALL:ALL) ALL', ""]
    assert policy.authorized_admins == "unix-group:sudo;unix-user:bob"


def test_last_client_admins_entry_replaces_polkit_identities():
    policy = compile_policy([_admins("alice"), _admins("bob")])

    assert list(policy.escalation_rules) == [
        '"alice"\tALL=(ALL:ALL) ALL',
        "",
        '"bob"\tALL=(ALL:ALL) ALL',
        "",
    ]
    assert policy.authorized_admins == "unix-user:bob"


def test_disabled_or_empty_client_admins_contribute_nothing():
    policy = compile_policy([_admins("alice"), _admins("bob", disabled=True), _admins(" , \n%")])

    assert list(policy.escalation_rules) == ['"alice"\tALL=(ALL:ALL) ALL', ""]
    assert policy.authorized_admins == "unix-user:alice"


def test_only_empty_client_admins_leave_polkit_untouched():
    policy = compile_policy([_admins("")], "unix-group:sudo")

    assert policy.escalation_rules == ()
    assert policy.authorized_admins is None


def test_unknown_keys_are_ignored():
    policy = compile_policy([PolicyEntry(key="future-setting", value="x"), _admins("bob")])

    assert list(policy.escalation_rules) == ['"bob"\tALL=(ALL:ALL) ALL', ""]
    assert policy.authorized_admins == "unix-user:bob"


def test_compilation_is_deterministic():
    entries = [_allow(True), _admins("bob,%ops")]
    assert compile_policy(entries, "x") == compile_policy(iter(entries), "x")
