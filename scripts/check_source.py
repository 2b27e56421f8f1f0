#!/usr/bin/env python3
"""Source checks for the runtime package and its tests.

- Imports live at module level (``if TYPE_CHECKING:`` blocks included).
- No comments that skip lint, type, security or coverage checks.
- No bare ``except:`` clauses.
- No ``print`` calls in the runtime package: stdout belongs to the log stream.
"""

import ast
import re
import sys
from pathlib import Path

PACKAGE_DIR = Path("lambda_runtime")
SCAN_DIRS = [PACKAGE_DIR, Path("tests"), Path("scripts")]

SKIP_PATTERNS = [
    (r"#\s*noqa", "noqa (lint skip)"),
    (r"#\s*type:\s*ignore", "type: ignore (type check skip)"),
    (r"#\s*nosec", "nosec (security skip)"),
    (r"#\s*pragma:\s*no\s*cover", "pragma: no cover (coverage skip)"),
]


class SourceChecker(ast.NodeVisitor):
    """AST visitor collecting structural violations for one file."""

    def __init__(self, filepath, *, forbid_print):
        self.filepath = filepath
        self.forbid_print = forbid_print
        self.scope_depth = 0
        self.violations = []

    def add_violation(self, node, message):
        self.violations.append(f"{self.filepath}:{node.lineno}: {message}")

    def _visit_scope(self, node):
        self.scope_depth += 1
        self.generic_visit(node)
        self.scope_depth -= 1

    visit_FunctionDef = _visit_scope
    visit_AsyncFunctionDef = _visit_scope
    visit_ClassDef = _visit_scope

    def visit_Import(self, node):
        if self.scope_depth > 0:
            names = ", ".join(alias.name for alias in node.names)
            self.add_violation(node, f"'import {names}' is not at module level")
        self.generic_visit(node)

    def visit_ImportFrom(self, node):
        if self.scope_depth > 0:
            self.add_violation(node, f"'from {node.module} import ...' is not at module level")
        self.generic_visit(node)

    def visit_ExceptHandler(self, node):
        if node.type is None:
            self.add_violation(node, "bare 'except:' clause")
        self.generic_visit(node)

    def visit_Call(self, node):
        if self.forbid_print and isinstance(node.func, ast.Name) and node.func.id == "print":
            self.add_violation(node, "print() in runtime code, use logging")
        self.generic_visit(node)


def find_skip_comments(filepath, content):
    violations = []
    for line_num, line in enumerate(content.splitlines(), start=1):
        for pattern, pattern_name in SKIP_PATTERNS:
            if re.search(pattern, line, re.IGNORECASE):
                violations.append(f"{filepath}:{line_num}: {pattern_name}")
                break
    return violations


def check_file(filepath):
    try:
        content = filepath.read_text(encoding="utf-8")
        tree = ast.parse(content, filename=str(filepath))
    except SyntaxError as e:
        return [f"{filepath}:{e.lineno}: Syntax error: {e.msg}"]
    except (OSError, UnicodeDecodeError) as e:
        return [f"{filepath}: Error reading file: {e}"]

    checker = SourceChecker(filepath, forbid_print=PACKAGE_DIR in filepath.parents)
    checker.visit(tree)
    return checker.violations + find_skip_comments(filepath, content)


def main():
    all_violations = []
    for directory in SCAN_DIRS:
        if not directory.exists():
            continue
        for filepath in directory.rglob("*.py"):
            if "__pycache__" in filepath.parts:
                continue
            all_violations.extend(check_file(filepath))

    if all_violations:
        print("Source violations found:")
        for violation in sorted(all_violations):
            print(f"  {violation}")
        return 1

    print("Source checks passed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
