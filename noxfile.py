"""Nox sessions for testing against multiple Polars versions."""

import nox

nox.options.default_venv_backend = "uv"

POLARS_VERSIONS = ["1.0.0", "1.20.0"]

POLARS_TESTS = [
    "tests/integration/test_polars_io.py",
    "tests/integration/test_polars_conversion.py",
]


@nox.session(python=["3.10", "3.12"])
def test_core(session: nox.Session) -> None:
    """Run the core unit tests without optional dependencies."""
    session.install("-e", ".", "pytest")
    session.run("pytest", "tests/unit", "-q")


@nox.session(python=["3.10"])
@nox.parametrize("polars", POLARS_VERSIONS)
def test_polars(session: nox.Session, polars: str) -> None:
    """Test flatframe_polars against specific Polars versions."""
    session.install("-e", ".", "pytest", f"polars=={polars}")
    session.run("pytest", *POLARS_TESTS, "-q")


@nox.session(python=["3.10"])
def test_arrow(session: nox.Session) -> None:
    """Test the pyarrow boundary."""
    session.install("-e", ".[arrow]", "pytest")
    session.run("pytest", "tests/integration/test_arrow_boundary.py", "-q")
