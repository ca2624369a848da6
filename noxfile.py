"""Nox configuration for Cost Guard development automation.

This file defines automated development tasks including linting, testing,
formatting and a self-check of the CLI against this repository.
"""

import nox

# Python versions to test against
PYTHON_VERSIONS = ["3.11"]

# Default sessions to run when no specific session is requested
nox.options.sessions = ["lint", "test", "coverage"]


def _install(session):
    session.install("poetry")
    session.run("poetry", "install", "--all-extras")


@nox.session(python=PYTHON_VERSIONS)
def lint(session):
    """Run linting with ruff and mypy."""
    _install(session)

    session.run("poetry", "run", "ruff", "check", "src", "tests")
    session.run("poetry", "run", "mypy", "src")

    session.log("✅ Linting completed successfully")


@nox.session(python=PYTHON_VERSIONS)
def format_code(session):
    """Format code with black and isort."""
    _install(session)

    session.run("poetry", "run", "black", "src", "tests")
    session.run("poetry", "run", "isort", "src", "tests")
    session.run("poetry", "run", "ruff", "check", "--fix", "src", "tests")

    session.log("✅ Code formatting completed")


@nox.session(python=PYTHON_VERSIONS)
def test(session):
    """Run the test suite with pytest."""
    _install(session)

    session.run(
        "poetry",
        "run",
        "pytest",
        "tests/",
        "-v",
        "--tb=short",
        "--strict-markers",
        "-m", "not slow",
        *session.posargs,
    )

    session.log("✅ Unit tests completed successfully")


@nox.session(python=PYTHON_VERSIONS)
def coverage(session):
    """Run tests with coverage reporting."""
    _install(session)

    session.run(
        "poetry",
        "run",
        "pytest",
        "tests/",
        "--cov=src",
        "--cov-report=term-missing",
        "--cov-report=html:htmlcov",
        "--cov-report=xml:coverage.xml",
        "--cov-fail-under=80",
        "-m", "not slow",
    )

    session.log("✅ Coverage analysis completed")
    session.log("📊 Coverage report available at htmlcov/index.html")


@nox.session(python=PYTHON_VERSIONS)
def inspect_project(session):
    """Run the inspector against a target project directory.

    Examples:
      nox -s inspect_project -- ../my-cdk-app
      nox -s inspect_project -- ../my-cdk-app --json
    """
    if not session.posargs:
        session.error("Pass a project directory: nox -s inspect_project -- <path>")
    _install(session)
    args = session.posargs
    session.run("poetry", "run", "costguard", "inspect", *args)


@nox.session(python=PYTHON_VERSIONS)
def clean(session):
    """Clean up build artifacts and cache files."""
    import shutil
    import os

    # Directories to clean
    clean_dirs = [
        ".pytest_cache",
        "__pycache__",
        ".coverage",
        "htmlcov",
        "coverage.xml",
        "dist",
        ".ruff_cache",
        ".mypy_cache",
    ]

    for dir_name in clean_dirs:
        if os.path.exists(dir_name):
            if os.path.isdir(dir_name):
                shutil.rmtree(dir_name)
                session.log(f"🗑️  Removed directory: {dir_name}")
            else:
                os.remove(dir_name)
                session.log(f"🗑️  Removed file: {dir_name}")

    session.log("✅ Cleanup completed")
