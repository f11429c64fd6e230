#!/usr/bin/env python3
"""Enforce the import boundaries of the certstore package.

boto3 is imported only by ``certstore/store/client.py``; every other module
receives a ready client. Nothing in the package imports ``scripts``.

Imports are read from the syntax tree, so imports nested in functions and
``import a, b`` forms are caught while comments and string literals are not.

Usage:
    python scripts/check_imports.py [files...]   # default: every module in certstore/
"""

from __future__ import annotations

import argparse
import ast
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

PACKAGE_ROOT = Path(__file__).resolve().parents[1] / "certstore"

# top-level module -> package files allowed to import it
BOUNDARIES: dict[str, tuple[str, ...]] = {
    "boto3": ("certstore/store/client.py",),
    "scripts": (),
}


@dataclass(frozen=True)
class Violation:
    path: Path
    line: int
    module: str

    def describe(self) -> str:
        return f"{self.path}:{self.line}: imports {self.module}"


def imported_modules(tree: ast.AST) -> Iterator[tuple[int, str]]:
    """Yield ``(line, dotted module)`` for every absolute import in ``tree``."""

    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield node.lineno, alias.name
        elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
            yield node.lineno, node.module


def check_source(source: str, path: Path) -> list[Violation]:
    tree = ast.parse(source, filename=str(path))
    location = path.as_posix()
    violations = []
    for line, module in imported_modules(tree):
        root = module.partition(".")[0]
        if root not in BOUNDARIES:
            continue
        if any(location.endswith(allowed) for allowed in BOUNDARIES[root]):
            continue
        violations.append(Violation(path, line, module))
    return sorted(violations, key=lambda v: v.line)


def check_file(path: Path) -> list[Violation]:
    return check_source(path.read_text(encoding="utf-8"), path)


def in_package(path: Path) -> bool:
    return path.suffix == ".py" and "certstore" in path.parent.parts


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check certstore import boundaries.")
    parser.add_argument("paths", nargs="*", type=Path, help="files to check")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    paths = args.paths or sorted(PACKAGE_ROOT.rglob("*.py"))

    violations = [v for path in paths if in_package(path) for v in check_file(path)]
    for violation in violations:
        print(violation.describe())

    if violations:
        print(f"Found {len(violations)} import boundary violation(s)")
        return 1
    print("Import boundaries respected")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
