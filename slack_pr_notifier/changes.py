"""Check whether a path was added or touched by a pull request's diff."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping

import structlog

from .errors import NotifierError

ADDED = "A"
DELETED = "D"


@dataclass(frozen=True)
class FileChange:
    """How a path appears in a diff."""

    path: str
    just_been_created: bool
    has_been_updated: bool


def _run(args: List[str], cwd: Path | str | None) -> subprocess.CompletedProcess[str]:
    return subprocess.run(args, cwd=cwd, text=True, capture_output=True, check=False)


def diff_entries(base_ref: str, head_ref: str = "HEAD", *, cwd: Path | str | None = None) -> Dict[str, str]:
    """Return ``{path: status letter}`` for the diff from the merge base of *base_ref* to *head_ref*.

    Renames and copies are keyed by their new path; a rename's old path is
    recorded as deleted.
    """

    diff = _run(["git", "diff", "--name-status", f"{base_ref}...{head_ref}"], cwd)
    if diff.returncode != 0:
        raise NotifierError(f"git diff {base_ref}...{head_ref} failed: {diff.stderr.strip()}")

    entries: Dict[str, str] = {}
    for line in diff.stdout.splitlines():
        parts = [part for part in line.strip().split("\t") if part]
        if len(parts) < 2:
            continue
        status = parts[0][0].upper()
        if status in {"R", "C"} and len(parts) >= 3:
            if status == "R":
                entries.setdefault(parts[1], DELETED)
            entries[parts[2]] = status
        else:
            entries[parts[1]] = status
    return entries


def _normalise(path: str) -> str:
    target = path.strip()
    if target.startswith("./"):
        target = target[2:]
    target = target.rstrip("/")
    return "" if target == "." else target


def inspect_path(path: str, entries: Mapping[str, str]) -> FileChange:
    """Describe *path* against diff *entries*; directories match any file beneath them."""

    target = _normalise(path)
    if not target:
        statuses = list(entries.values())
    else:
        prefix = f"{target}/"
        statuses = [status for name, status in entries.items() if name == target or name.startswith(prefix)]

    return FileChange(
        path=path,
        just_been_created=ADDED in statuses,
        has_been_updated=bool(statuses),
    )


def check_file_changed(
    path: str,
    base_ref: str,
    head_ref: str = "HEAD",
    *,
    cwd: Path | str | None = None,
) -> FileChange:
    entries = diff_entries(base_ref, head_ref, cwd=cwd)
    change = inspect_path(path, entries)
    structlog.get_logger().info(
        "file_change_checked",
        path=path,
        base_ref=base_ref,
        head_ref=head_ref,
        just_been_created=change.just_been_created,
        has_been_updated=change.has_been_updated,
        changed_count=len(entries),
    )
    return change
