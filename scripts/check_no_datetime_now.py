#!/usr/bin/env python3
"""Pre-commit hook to prevent direct wall-clock reads in production code.

Motion deadlines are days long and are tested with a fake clock. Any code
that reads the host clock directly cannot be driven by that clock, so
every service receives a TimeAuthorityProtocol instead.

This script scans src/ for datetime.now(), datetime.utcnow() and
time.time() calls and fails if any are found outside the system clock
adapter.

Usage:
    python scripts/check_no_datetime_now.py

Exit codes:
    0: No violations found
    1: Violations found
"""

import re
import sys
from pathlib import Path

WALL_CLOCK_PATTERN = re.compile(
    r"(datetime\s*\.\s*(now|utcnow)|time\s*\.\s*time)\s*\(", re.MULTILINE
)

# The system clock adapter is the one place allowed to read the host clock
ALLOWED_FILES = {
    "src/infrastructure/adapters/system_time_authority.py",
}


def check_source(content: str) -> list[tuple[int, str]]:
    """Find wall-clock reads in source text.

    Returns:
        List of (line_number, line_content) tuples for violations.
    """
    violations: list[tuple[int, str]] = []
    for line_num, line in enumerate(content.splitlines(), start=1):
        if line.lstrip().startswith("#"):
            continue
        if WALL_CLOCK_PATTERN.search(line):
            violations.append((line_num, line.strip()))
    return violations


def check_file(file_path: Path) -> list[tuple[int, str]]:
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return []
    return check_source(content)


def find_violations(src_path: Path) -> dict[str, list[tuple[int, str]]]:
    """Scan every Python file under src_path, skipping allowed files."""
    all_violations: dict[str, list[tuple[int, str]]] = {}
    for py_file in sorted(src_path.rglob("*.py")):
        relative_path = py_file.as_posix()
        if relative_path in ALLOWED_FILES:
            continue
        violations = check_file(py_file)
        if violations:
            all_violations[relative_path] = violations
    return all_violations


def main() -> int:
    src_path = Path("src")
    if not src_path.exists():
        print("Warning: src/ directory not found, skipping check")
        return 0

    all_violations = find_violations(src_path)
    if not all_violations:
        print("No wall-clock reads found in src/")
        return 0

    print("Direct wall-clock reads detected:")
    print()
    for file_path, violations in all_violations.items():
        print(f"  {file_path}:")
        for line_num, line_content in violations:
            print(f"    Line {line_num}: {line_content}")
        print()

    print("How to fix:")
    print("  Inject TimeAuthorityProtocol and call self._time.now()")
    return 1


if __name__ == "__main__":
    sys.exit(main())
