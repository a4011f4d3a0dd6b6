"""
Kernel Boundary Contract.

Tests that enforce the package layering:

1. portfolio_kernel/** may NOT import portfolio_config or
   portfolio_modules. The kernel never depends upward.

2. portfolio_config/** may NOT import portfolio_modules.

3. Aggregate modules are independent: allocation and budget never
   import each other.

4. Domain and module code never read the wall clock directly; every
   time lookup goes through an injected Clock.

These tests read source code via AST -- they cannot break anything.
"""

import ast
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _python_files(package: str) -> list[Path]:
    """Return all .py files under a top-level package."""
    return sorted((REPO_ROOT / package).rglob("*.py"))


def _parse(filepath: Path) -> ast.AST | None:
    try:
        return ast.parse(filepath.read_text(), filename=str(filepath))
    except (SyntaxError, UnicodeDecodeError):
        return None


def _extract_imports(filepath: Path) -> list[tuple[int, str]]:
    """Extract (line_number, module_string) for all imports in a file."""
    tree = _parse(filepath)
    if tree is None:
        return []

    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                results.append((node.lineno, node.module))
    return results


def _violations(package: str, forbidden: tuple[str, ...]) -> list[str]:
    found: list[str] = []
    for filepath in _python_files(package):
        for lineno, module in _extract_imports(filepath):
            for prefix in forbidden:
                if module == prefix or module.startswith(f"{prefix}."):
                    found.append(
                        f"  {filepath.relative_to(REPO_ROOT)}:{lineno} imports '{module}'"
                    )
    return found


# ---------------------------------------------------------------------------
# Test: Layering
# ---------------------------------------------------------------------------


class TestKernelNoUpwardDependencies:
    """portfolio_kernel/** must not import portfolio_config or portfolio_modules."""

    FORBIDDEN_PREFIXES = (
        "portfolio_config",
        "portfolio_modules",
    )

    def test_kernel_files_found(self):
        assert _python_files("portfolio_kernel")

    def test_kernel_does_not_import_forbidden_packages(self):
        violations = _violations("portfolio_kernel", self.FORBIDDEN_PREFIXES)
        assert not violations, (
            "Kernel boundary violation -- portfolio_kernel/** must not import "
            "upward packages:\n" + "\n".join(violations)
        )


class TestConfigLayer:

    def test_config_does_not_import_modules(self):
        violations = _violations("portfolio_config", ("portfolio_modules",))
        assert not violations, (
            "Config boundary violation -- portfolio_config/** must not import "
            "portfolio_modules:\n" + "\n".join(violations)
        )


class TestModuleIndependence:

    def test_allocation_does_not_import_budget(self):
        violations = _violations("portfolio_modules/allocation", ("portfolio_modules.budget",))
        assert not violations, "\n".join(violations)

    def test_budget_does_not_import_allocation(self):
        violations = _violations("portfolio_modules/budget", ("portfolio_modules.allocation",))
        assert not violations, "\n".join(violations)


# ---------------------------------------------------------------------------
# Test: Injected time only
# ---------------------------------------------------------------------------


class TestNoAmbientClock:
    """Only clock.py may call datetime.now()/date.today()/utcnow()."""

    AMBIENT_CALLS = {"now", "today", "utcnow"}
    ALLOWED = {"portfolio_kernel/domain/clock.py", "portfolio_kernel/logging_config.py"}

    def test_no_direct_wall_clock_reads(self):
        violations: list[str] = []

        for package in ("portfolio_kernel", "portfolio_modules"):
            for filepath in _python_files(package):
                rel = filepath.relative_to(REPO_ROOT).as_posix()
                if rel in self.ALLOWED:
                    continue
                tree = _parse(filepath)
                if tree is None:
                    continue
                for node in ast.walk(tree):
                    if (
                        isinstance(node, ast.Call)
                        and isinstance(node.func, ast.Attribute)
                        and node.func.attr in self.AMBIENT_CALLS
                        and isinstance(node.func.value, ast.Name)
                        and node.func.value.id in {"datetime", "date"}
                    ):
                        violations.append(f"  {rel}:{node.lineno} calls {node.func.value.id}.{node.func.attr}()")

        assert not violations, (
            "Ambient clock read -- use an injected Clock instead:\n" + "\n".join(violations)
        )
