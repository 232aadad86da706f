from __future__ import annotations

import nox

nox.options.sessions = ["tests", "smoke"]


@nox.session(python="3.12")
def tests(session: nox.Session) -> None:
    session.install("-e", ".[test]")
    session.run("pytest", "-q", *session.posargs)


@nox.session(python="3.12")
def properties(session: nox.Session) -> None:
    session.install("-e", ".[test]")
    session.run("pytest", "-q", "-m", "property", "--hypothesis-show-statistics", *session.posargs)


@nox.session(python="3.12")
def smoke(session: nox.Session) -> None:
    """Install the package non-editable and exercise the console script."""
    session.install(".")
    session.run("distpub", "--version")
    session.run("distpub", "--help")
    session.run("python", "-m", "distpub", "--help")


# Alias with version suffix for CI convenience
@nox.session(name="tests-3.12", python="3.12")
def tests_312(session: nox.Session) -> None:
    tests(session)
