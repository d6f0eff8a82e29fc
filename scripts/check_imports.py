#!/usr/bin/env python3
"""Check hexagonal architecture import boundaries.

Layering rules for the motion lifecycle engine:
- domain/: Motion model and policies, NO imports from other src layers
- config/: Environment-driven settings, may import domain/
- application/: Ports and services, may import domain/ and config/
- infrastructure/: Adapters and stubs, may import domain/, config/, application/
- bootstrap/: Composition root, may import every layer

Usage:
    python scripts/check_imports.py [src_directory]

Exit codes:
    0: No violations found
    1: Violations found
"""
import ast
import sys
from pathlib import Path

# Lower number = more inner layer (more protected)
LAYER_HIERARCHY: dict[str, int] = {
    "domain": 0,
    "config": 1,
    "application": 2,
    "infrastructure": 3,
    "bootstrap": 4,
}

# What each layer CAN import from, besides itself
ALLOWED_IMPORTS: dict[str, set[str]] = {
    "domain": set(),
    "config": {"domain"},
    "application": {"domain", "config"},
    "infrastructure": {"domain", "config", "application"},
    "bootstrap": {"domain", "config", "application", "infrastructure"},
}

Violation = tuple[str, int, str]


def get_import_module(node: ast.Import | ast.ImportFrom) -> str | None:
    """Extract the module name from an import statement."""
    if isinstance(node, ast.ImportFrom):
        return node.module
    if isinstance(node, ast.Import) and node.names:
        return node.names[0].name
    return None


def get_file_layer(py_file: Path, src_dir: Path) -> str | None:
    """Determine the architectural layer of a file, or None if it has none."""
    try:
        parts = py_file.relative_to(src_dir).parts
    except ValueError:
        return None
    if len(parts) < 2:
        return None
    return parts[0] if parts[0] in LAYER_HIERARCHY else None


def check_import(module: str, file_layer: str) -> str | None:
    """Return a violation message if ``file_layer`` may not import ``module``."""
    module_parts = module.split(".")
    if module_parts[0] != "src" or len(module_parts) < 2:
        return None

    target_layer = module_parts[1]
    if target_layer not in LAYER_HIERARCHY or target_layer == file_layer:
        return None
    if target_layer not in ALLOWED_IMPORTS[file_layer]:
        return f"{file_layer} layer cannot import from {target_layer}"
    return None


def check_file_imports(py_file: Path, src_dir: Path) -> list[Violation]:
    """Check a single file for import boundary violations."""
    file_layer = get_file_layer(py_file, src_dir)
    if file_layer is None:
        return []

    try:
        tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
    except (SyntaxError, UnicodeDecodeError) as e:
        print(f"Warning: Could not parse {py_file}: {e}", file=sys.stderr)
        return []

    violations: list[Violation] = []
    for node in ast.walk(tree):
        if not isinstance(node, (ast.Import, ast.ImportFrom)):
            continue
        module = get_import_module(node)
        if module is None:
            continue
        message = check_import(module, file_layer)
        if message:
            violations.append((str(py_file), node.lineno, message))
    return violations


def check_import_boundaries(src_dir: Path) -> list[Violation]:
    """Check every Python file under ``src_dir``."""
    if not src_dir.exists():
        print(f"Error: Source directory '{src_dir}' does not exist", file=sys.stderr)
        return []

    violations: list[Violation] = []
    for py_file in sorted(src_dir.rglob("*.py")):
        violations.extend(check_file_imports(py_file, src_dir))
    return violations


def format_violations(violations: list[Violation]) -> str:
    """Format violations for human-readable output."""
    if not violations:
        return ""

    lines = ["Import boundary violations found:", ""]
    for file_path, line_no, message in sorted(violations):
        lines.append(f"  {file_path}:{line_no}: {message}")
    lines.append("")
    lines.append(f"Total: {len(violations)} violation(s)")
    return "\n".join(lines)


def main() -> int:
    if len(sys.argv) > 1:
        src_dir = Path(sys.argv[1])
    else:
        src_dir = Path(__file__).parent.parent / "src"

    violations = check_import_boundaries(src_dir)
    if violations:
        print(format_violations(violations))
        return 1
    print("No import boundary violations found.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
