"""Nox sessions for polybar-now-playing development tasks."""

from __future__ import annotations

import nox

nox.options.error_on_missing_interpreters = False
nox.options.sessions = ["lint", "typecheck", "tests"]

PACKAGE = "src/polybar_now_playing"


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
    """Run pytest without touching the session bus."""
    session.install("-e", ".[dev]")
    session.run("pytest", "-q", env={"NOW_PLAYING_CI": "1"})


@nox.session(name="tests-bus")
def tests_bus(session: nox.Session) -> None:
    """Run pytest including the live session-bus smoke test."""
    session.install("-e", ".[dev,dbus]")
    session.run("pytest", "-q", "-m", "session_bus", *session.posargs)


@nox.session
def typecheck(session: nox.Session) -> None:
    """Run mypy over the package."""
    session.install("-e", ".[dev]")
    session.run("mypy", PACKAGE)


@nox.session
def coverage(session: nox.Session) -> None:
    """Run coverage reporting."""
    session.install("-e", ".[dev]")
    session.run(
        "coverage",
        "run",
        "--source=polybar_now_playing",
        "-m",
        "pytest",
        env={"NOW_PLAYING_CI": "1"},
    )
    session.run("coverage", "report", "--fail-under=85", "-m")


@nox.session(name="local-dev", venv_backend="none")
def local_dev(session: nox.Session) -> None:
    """Fast local lint, typecheck and tests using the active venv."""
    session.run("python", "-m", "ruff", "check", ".", external=True)
    session.run("python", "-m", "mypy", PACKAGE, external=True)
    session.run("python", "-m", "pytest", "-q", external=True)


@nox.session
def build(session: nox.Session) -> None:
    """Build sdist and wheel artifacts."""
    session.install("build")
    session.run("python", "-m", "build")
