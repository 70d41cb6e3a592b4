"""Pytest configuration and fixtures for class_generics tests."""

import sys

import pytest

from class_generics import core


@pytest.fixture(autouse=True)
def reset_registries():
    """
    Drop registries created during a test.

    Registries live in a process-wide table; removing the ones a test added
    keeps test-local classes from accumulating across the session.
    """
    before = set(core._REGISTRIES)
    yield
    for owner in set(core._REGISTRIES) - before:
        del core._REGISTRIES[owner]
    # Remove any generated test modules from sys.modules
    to_remove = [key for key in sys.modules.keys() if 'generics_pkg' in key]
    for key in to_remove:
        del sys.modules[key]


@pytest.fixture
def session_class():
    """A fresh, undeclared Session class."""

    class Session:
        def timeout(self):
            return self.SESSION_TIMEOUT()

        def new_id(self):
            return 'x' * self.SESSION_ID_LENGTH()

    return Session


@pytest.fixture
def generics_pkg(tmp_path, monkeypatch):
    """
    Create an importable package with a Session class in generics_pkg.sessions.

    Returns the package directory path.
    """
    pkg_dir = tmp_path / "generics_pkg"
    pkg_dir.mkdir()
    (pkg_dir / "__init__.py").write_text("")
    (pkg_dir / "sessions.py").write_text(
        """
from class_generics import declare


class Session:
    class Cookie:
        pass


declare(Session, 'SESSION_TIMEOUT')
declare(Session.Cookie, 'MAX_AGE')
"""
    )
    (pkg_dir / "broken.py").write_text(
        """
import generics_missing_dependency


class Session:
    pass
"""
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    return pkg_dir
