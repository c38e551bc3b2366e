"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (HTTP API in-process)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


def _text(text):
    return {"type": "text", "raw": text, "text": text, "tokens": [{"type": "text", "raw": text, "text": text}]}


def _item(text, correct=False):
    if correct:
        child = {"type": "heading", "depth": 2, "text": text, "tokens": [{"type": "text", "text": text}]}
    else:
        child = _text(text)
    return {"type": "list_item", "text": text, "tokens": [child]}


@pytest.fixture
def lexer_quiz_tokens():
    """
    Lexer output for a two-question document:

        # Which layer of the OSI model handles routing?
        - Physical Layer
        - Data Link Layer
        - ## Network Layer
        ### Routers forward packets between networks at layer 3.

        # Name the protocol used to resolve IPv4 addresses to MAC addresses.
        - ARP
    """
    return [
        {"type": "heading", "depth": 1, "text": "Which layer of the OSI model handles routing?",
         "tokens": [{"type": "text", "text": "Which layer of the OSI model handles routing?"}]},
        {"type": "list", "ordered": False, "items": [
            _item("Physical Layer"),
            _item("Data Link Layer"),
            _item("Network Layer", correct=True),
        ]},
        {"type": "heading", "depth": 3, "text": "Routers forward packets between networks at layer 3.",
         "tokens": []},
        {"type": "space", "raw": "\n\n"},
        {"type": "heading", "depth": 1,
         "text": "Name the protocol used to resolve IPv4 addresses to MAC addresses.", "tokens": []},
        {"type": "list", "ordered": False, "items": [_item("ARP")]},
    ]


@pytest.fixture
def sample_quiz_question():
    """Provide a valid multiple-choice question record."""
    return {
        "question": "Which layer of the OSI model handles routing?",
        "options": {},
        "answers": [
            {"answer_id": "a1", "answer": "Physical Layer", "options": {}, "is_correct": False},
            {"answer_id": "a2", "answer": "Data Link Layer", "options": {}, "is_correct": False},
            {"answer_id": "a3", "answer": "Network Layer", "options": {}, "is_correct": True},
        ],
        "explanation": "Routers forward packets between networks at layer 3.",
        "attempts": 0,
        "reported": False,
    }


@pytest.fixture
def sample_open_question():
    """Provide a valid open (single answer) question record."""
    return {
        "question": "Name the protocol used to resolve IPv4 addresses to MAC addresses.",
        "options": {"type": "open", "content": True},
        "answers": [
            {"answer_id": "a1", "answer": "ARP", "options": {}, "is_correct": False},
        ],
        "explanation": "",
        "attempts": 0,
        "reported": False,
    }
