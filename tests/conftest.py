"""
Shared fixtures for jsonlens tests
"""
import pytest


@pytest.fixture
def sample_document():
    """Small decoded document mixing every JSON type"""
    return {
        "Name": "Alice",
        "age": 30,
        "active": True,
        "manager": None,
        "tags": ["admin", "ops"],
        "address": {"city": "Oslo", "zip code": "0150"},
    }


@pytest.fixture
def pretty_valid_text():
    return "\n".join(
        [
            "{",
            '  "name": "x",',
            '  "url": "http://example.com/a",',
            '  "n": -1.5e3,',
            '  "ok": true,',
            '  "list": [',
            "    1,",
            '    "two",',
            "    null",
            "  ]",
            "}",
        ]
    )
