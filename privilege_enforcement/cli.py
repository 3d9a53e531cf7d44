"""CLI entry point for privilege-enforcement."""

from __future__ import annotations

import argparse
import json
import logging
import socket
import sys
from typing import List, Optional

from privilege_enforcement import __version__
from privilege_enforcement import config, entries, reporter
from privilege_enforcement.manager import PrivilegeManager


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    sudoers_env, policykit_env = config.env_dirs()
    parser = argparse.ArgumentParser(
        prog="privilege-enforcement",
        description="Apply sudoers and polkit privilege policy entries to this host",
    )
    parser.add_argument("entries", help="JSON file holding the ordered policy entries")
    parser.add_argument("--object", default=socket.gethostname(), help="Name of the object the policy applies to")
    parser.add_argument("--user", action="store_true", help="The object is a user, not a computer")
    parser.add_argument("--sudoers-dir", default=sudoers_env, help=f"Sudoers drop-in directory (default: {config.DEFAULT_SUDOERS_DIR})")
    parser.add_argument("--policykit-dir", default=policykit_env, help=f"Polkit configuration directory (default: {config.DEFAULT_POLICYKIT_DIR})")
    parser.add_argument("--dry-run", action="store_true", help="Compile and print the policy without writing it")
    parser.add_argument("--format", choices=["text", "json"], default="text", help="Report output format")
    parser.add_argument("--output", help="Write report to file")
    parser.add_argument("--verbose", action="store_true", help="Show debug logs and generated file contents")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors in text output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        policy_entries = entries.load_entries(args.entries)
        manager = PrivilegeManager(args.sudoers_dir, args.policykit_dir)
        is_computer = not args.user

        if args.dry_run:
            policy = manager.preview(policy_entries) if is_computer else None
        else:
            policy = manager.apply_policy(args.object, is_computer, policy_entries)

        report = reporter.build_report(args.object, is_computer, manager.targets(), policy, dry_run=args.dry_run)

        if args.format == "json":
            output = json.dumps(report, indent=2)
        else:
            output = reporter.render_text(report, use_color=not args.no_color, verbose=args.verbose)

        print(output)

        if args.output:
            reporter.write_report(report, args.output)

        return 0
    except Exception as exc:  # pragma: no cover
        print(f"ERROR: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
