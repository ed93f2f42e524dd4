"""Nox sessions for testing and development tasks.

Run with: uv run nox [session]
"""

import shutil
from pathlib import Path

import nox

nox.options.default_venv_backend = "uv"
nox.options.stop_on_first_error = True
nox.options.error_on_external_run = True

# Format first (incl. lint), clean coverage, run tests, then report
nox.options.sessions = [
    "format",
    "lint",
    "cov-clean",
    "test",
    "cov-combine",
]

PYTHON_VERSIONS = ["3.9", "3.10", "3.11", "3.12", "3.13", "3.14"]

# Tools run only on the latest Python version
TOOLS_PYTHON = PYTHON_VERSIONS[-1]


@nox.session(python=PYTHON_VERSIONS)
def test(session):
    """Run tests with coverage for each Python version."""
    session.install(".[test]")
    test_args = session.posargs or ["tests"]
    # Parallel mode writes one .coverage.* file per run, combined later
    session.run(
        "coverage",
        "run",
        "--parallel-mode",
        "--source",
        "spanrite",
        "-m",
        "pytest",
        "-qq",
        *test_args,
    )


@nox.session(python=TOOLS_PYTHON)
def lint(session):
    """Run linting checks with ruff and type checking with ty."""
    session.install("ruff", "ty")
    session.run("ruff", "check", ".")
    session.run("ruff", "format", "--check", ".")
    session.run("ty", "check", "spanrite")


@nox.session(python=TOOLS_PYTHON)
def format(session):
    """Format code with ruff."""
    session.install("ruff")
    session.run("ruff", "check", "--fix", ".")
    session.run("ruff", "format", ".")


@nox.session(python=TOOLS_PYTHON, name="cov-clean")
def cov_clean(session):
    """Remove coverage data and reports."""
    for path in Path(".").glob(".coverage*"):
        if path.is_file():
            path.unlink()
    shutil.rmtree("htmlcov", ignore_errors=True)
    Path("coverage.xml").unlink(missing_ok=True)


@nox.session(python=TOOLS_PYTHON, name="cov-combine")
def cov_combine(session):
    """Combine parallel coverage data and write the reports."""
    session.install("coverage")
    session.run("coverage", "combine", "--keep", success_codes=[0, 1])
    session.run("coverage", "report", "-m")
    session.run("coverage", "html")
    session.run("coverage", "xml")


@nox.session(python=TOOLS_PYTHON)
def clean(session):
    """Clean build artifacts and caches."""
    session.notify("cov-clean")
    patterns = [
        "**/__pycache__",
        "dist",
        "build",
        "*.egg-info",
        ".pytest_cache",
        ".ruff_cache",
        ".nox",
    ]
    for pattern in patterns:
        for path in Path(".").glob(pattern):
            shutil.rmtree(path, ignore_errors=True)
