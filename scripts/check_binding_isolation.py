#!/usr/bin/env python3
"""Binding isolation validation script.

core/, types/ and utils/ must work without any bot framework installed:
only the bindings under ext/ may import discord.py or hikari, and nothing
outside ext/ may import from a binding.

Imports are read from the syntax tree, so names inside strings, comments
and docstrings (Discord webhooks are a core feature) are not flagged.

Exit codes:
    0: No violations found (clean)
    1: Violations detected (architectural rule broken)
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path
from typing import Final

RED: Final[str] = "\033[91m"
GREEN: Final[str] = "\033[92m"
RESET: Final[str] = "\033[0m"

PROTECTED_DIRS: Final[tuple[str, ...]] = ("core", "types", "utils")

FORBIDDEN_ROOTS: Final[frozenset[str]] = frozenset({"discord", "hikari"})
BINDINGS_PACKAGE: Final[str] = "radarcord.ext"


def _imported_modules(node: ast.AST) -> list[str]:
    if isinstance(node, ast.Import):
        return [alias.name for alias in node.names]
    if isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
        return [node.module]
    return []


def check_file(file_path: Path) -> list[tuple[int, str]]:
    """Return ``(line, description)`` for every forbidden import in a file."""
    tree = ast.parse(file_path.read_text(encoding="utf-8"), filename=str(file_path))
    violations: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        for module in _imported_modules(node):
            if module.split(".")[0] in FORBIDDEN_ROOTS:
                violations.append((node.lineno, f"bot framework import: {module}"))  # pyright: ignore[reportAttributeAccessIssue]
            elif module == BINDINGS_PACKAGE or module.startswith(f"{BINDINGS_PACKAGE}."):
                violations.append((node.lineno, f"import from a binding: {module}"))  # pyright: ignore[reportAttributeAccessIssue]
    return sorted(violations)


def collect_violations(package_root: Path) -> dict[Path, list[tuple[int, str]]]:
    """Scan every protected directory below the package root."""
    found: dict[Path, list[tuple[int, str]]] = {}
    for protected_dir in PROTECTED_DIRS:
        for py_file in sorted((package_root / protected_dir).rglob("*.py")):
            if violations := check_file(py_file):
                found[py_file] = violations
    return found


def main() -> int:
    """Run the check against src/radarcord.

    Returns:
        Exit code: 0 if no violations, 1 if violations found.
    """
    project_root = Path(__file__).resolve().parent.parent
    package_root = project_root / "src" / "radarcord"
    if not package_root.is_dir():
        print(f"{RED}Error: Could not find {package_root}{RESET}", file=sys.stderr)
        return 1

    found = collect_violations(package_root)
    if not found:
        print(f"{GREEN}✓ core, types and utils import no bot framework{RESET}")
        return 0

    for file_path, violations in found.items():
        print(f"{RED}{file_path.relative_to(project_root)}{RESET}")
        for line_num, description in violations:
            print(f"  {line_num}: {description}")

    total = sum(len(v) for v in found.values())
    print(f"\n{RED}✗ {total} binding isolation violation(s); move framework code into ext/{RESET}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
