"""Nox sessions for TuneDeck development tasks."""

from __future__ import annotations

import nox

PACKAGE = "tune_deck"

nox.options.error_on_missing_interpreters = False
nox.options.sessions = ["lint", "tests", "typecheck"]


@nox.session
def lint(session: nox.Session) -> None:
    """Run ruff linting and formatting checks."""
    session.install("ruff")
    session.run("ruff", "check", ".")
    session.run("ruff", "format", "--check", ".")


@nox.session(name="lint-fix")
def lint_fix(session: nox.Session) -> None:
    """Apply ruff fixes and formatting."""
    session.install("ruff")
    session.run("ruff", "check", "--fix", ".")
    session.run("ruff", "format", ".")


@nox.session
def tests(session: nox.Session) -> None:
    """Run pytest without touching a real Music app."""
    session.install("-e", ".[dev]")
    session.env["TUNEDECK_CI"] = "1"
    session.run("pytest", "-q", *session.posargs)


@nox.session
def typecheck(session: nox.Session) -> None:
    """Run mypy using the settings in pyproject.toml."""
    session.install("-e", ".[dev]")
    session.install("mypy")
    session.run("mypy", f"src/{PACKAGE}")


@nox.session
def coverage(session: nox.Session) -> None:
    """Run coverage reporting."""
    session.install("-e", ".[dev]")
    session.install("coverage")
    session.env["TUNEDECK_CI"] = "1"
    session.run("coverage", "run", f"--source={PACKAGE}", "-m", "pytest")
    session.run("coverage", "report", "--fail-under=80", "-m")


@nox.session(name="tests-dev", venv_backend="none")
def tests_dev(session: nox.Session) -> None:
    """Fast local pytest using the active venv."""
    session.run("python", "-m", "pytest", "-q", *session.posargs, external=True)
