"""
Pytest configuration and shared fixtures for all quickchain tests.

The lexer loads (and caches) its Lark grammar once per session; the driver
is stateless, so both are safe to share across tests.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from quickchain.compiler.driver import ExpansionDriver
from quickchain.frontend.lexer import TokenTreeLexer


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_lexer():
    """Session-scoped lexer; building the Lark parser is the expensive part."""
    return TokenTreeLexer()


@pytest.fixture(scope="session")
def session_driver(session_lexer):
    """Session-scoped stateless driver shared across ALL tests."""
    return ExpansionDriver(lexer=session_lexer)


# =============================================================================
# Helper fixtures
# =============================================================================

@pytest.fixture
def tokenize(session_lexer):
    """Source text -> token stream."""
    def _tokenize(source: str, source_file: str = "<test>"):
        return session_lexer.tokenize(source, source_file)
    return _tokenize


@pytest.fixture
def no_color(monkeypatch):
    """Plain diagnostics regardless of the caller's environment."""
    monkeypatch.setenv("NO_COLOR", "1")


def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
