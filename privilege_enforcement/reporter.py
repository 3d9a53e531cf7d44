"""Report composition and rendering."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

from privilege_enforcement.compiler import CompiledPolicy

COLOR = {
    "reset": "\033[0m",
    "green": "\033[92m",
    "yellow": "\033[93m",
    "red": "\033[91m",
    "bold": "\033[1m",
}

STATUS_COLORS = {"APPLIED": "green", "PREVIEW": "yellow", "REMOVED": "yellow", "SKIPPED": "yellow"}


def _status(is_computer: bool, dry_run: bool, policy: Optional[CompiledPolicy]) -> str:
    if not is_computer:
        return "SKIPPED"
    if dry_run:
        return "PREVIEW"
    if policy is None:
        return "REMOVED"
    return "APPLIED"


def build_report(
    object_name: str,
    is_computer: bool,
    targets: List[Path],
    policy: Optional[CompiledPolicy],
    dry_run: bool = False,
) -> Dict[str, object]:
    sudoers_path, polkit_path = (str(path) for path in targets)
    report: Dict[str, object] = {
        "object": object_name,
        "is_computer": is_computer,
        "status": _status(is_computer, dry_run, policy),
        "sudoers_file": sudoers_path,
        "polkit_file": polkit_path,
        "rules": [],
        "admin_identities": None,
    }
    if policy is not None and is_computer:
        report["rules"] = [line for line in policy.escalation_rules if line]
        report["admin_identities"] = policy.authorized_admins
        if dry_run:
            report["sudoers_content"] = policy.sudoers_content()
            report["polkit_content"] = policy.polkit_content()
    return report


def write_report(report: Dict[str, object], path: str) -> None:
    Path(path).write_text(json.dumps(report, indent=2), encoding="utf-8")


def render_text(report: Dict[str, object], use_color: bool = True, verbose: bool = False) -> str:
    c = COLOR if use_color else {k: "" for k in COLOR}
    status = str(report.get("status"))
    rules = report.get("rules") or []
    admins = report.get("admin_identities")

    lines = [
        f"{c['bold']}Privilege policy: {report.get('object', 'unknown')}{c['reset']}",
        "-----------------------------------------",
        f"Status: {c[STATUS_COLORS.get(status, 'red')]}{status}{c['reset']}",
    ]

    if status == "SKIPPED":
        lines.append("└─ Not a computer object, nothing to do")
        return "\n".join(lines)

    lines.append(f"├─ Sudoers file: {report.get('sudoers_file')}")
    if status == "REMOVED":
        lines.append(f"└─ Polkit file: {report.get('polkit_file')}")
        lines.append("No policy entries: both files removed")
        return "\n".join(lines)

    if rules:
        for rule in rules:
            lines.append(f"│   → {rule}")
    else:
        lines.append("│   → no escalation rules")

    if admins is None:
        lines.append(f"└─ Polkit file: {report.get('polkit_file')} (system default)")
    else:
        lines.append(f"└─ Polkit file: {report.get('polkit_file')}")
        lines.append(f"    → AdminIdentities={admins}")

    if verbose and status == "PREVIEW":
        lines.extend(["", "--- sudoers ---", str(report.get("sudoers_content", "")).rstrip("\n")])
        if report.get("polkit_content") is not None:
            lines.extend(["--- polkit ---", str(report["polkit_content"]).rstrip("\n")])

    return "\n".join(lines)
