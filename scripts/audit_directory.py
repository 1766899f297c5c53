"""
Name: Directory Audit Script

Responsibilities:
  - Load a directory export (JSON list of user records, or an object with
    "users" and optional "departments" / "teams" id lists)
  - Validate every record and the reporting hierarchy
  - Print one JSON line per violation; exit 1 when any is found

Exit status:
  0 valid, 1 violations found, 2 unreadable input
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Sequence

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from orgdir.application.usecases.directory import DirectoryAuditResult  # noqa: E402
from orgdir.crosscutting.config import get_settings  # noqa: E402
from orgdir.crosscutting.exceptions import RecordFormatError  # noqa: E402
from orgdir.crosscutting.logger import setup_logger  # noqa: E402
from orgdir.domain.directory_rules import validate_population  # noqa: E402
from orgdir.infrastructure.repositories import InMemoryPlacementCatalog  # noqa: E402
from orgdir.interfaces.records import read_directory_file  # noqa: E402


def _split_ids(raw: str | None) -> tuple[str, ...] | None:
    if raw is None:
        return None
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] == "--":
        argv = argv[1:]
    parser = argparse.ArgumentParser(
        description="Validate a directory export and report every violation."
    )
    parser.add_argument("--input", required=True, help="Path to the JSON export")
    parser.add_argument(
        "--departments",
        help="Comma-separated department ids (overrides the file's list)",
    )
    parser.add_argument(
        "--teams",
        help="Comma-separated team ids (overrides the file's list)",
    )
    parser.add_argument(
        "--derive-reports",
        action="store_true",
        help="Fill absent directReports from managerId; stored lists are still checked",
    )
    return parser.parse_args(argv)


def run_audit(
    input_path: str,
    *,
    departments: Sequence[str] | None = None,
    teams: Sequence[str] | None = None,
    derive_reports: bool = False,
) -> DirectoryAuditResult:
    """Audit one export. Department/team checks run only when ids are known."""
    export = read_directory_file(input_path, derive_reports=derive_reports)

    department_ids = departments if departments is not None else export.department_ids
    team_ids = teams if teams is not None else export.team_ids
    placements = None
    if department_ids is not None or team_ids is not None:
        placements = InMemoryPlacementCatalog(
            department_ids=department_ids or (),
            team_ids=team_ids or (),
        )

    # Exports may carry duplicate ids, which a repository cannot hold, so the
    # population is validated as loaded.
    result = validate_population(
        export.users,
        placements=placements,
        policy=get_settings().validation_policy(),
    )
    return DirectoryAuditResult(result=result, user_count=len(export.users))


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    # stdout carries the violations only.
    setup_logger(
        level=settings.log_level, use_json=settings.log_json, stream=sys.stderr
    )

    try:
        report = run_audit(
            args.input,
            departments=_split_ids(args.departments),
            teams=_split_ids(args.teams),
            derive_reports=args.derive_reports,
        )
    except RecordFormatError as exc:
        print(
            f"Cannot read {args.input}: {exc} "
            f"(error_code={exc.error_code} error_id={exc.error_id})",
            file=sys.stderr,
        )
        return 2
    except OSError as exc:
        print(f"Cannot read {args.input}: {exc}", file=sys.stderr)
        return 2

    for violation in report.result:
        print(json.dumps(violation.to_dict(), ensure_ascii=False, sort_keys=True))

    print(
        f"users={report.user_count} violations={len(report.result)}",
        file=sys.stderr,
    )
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
