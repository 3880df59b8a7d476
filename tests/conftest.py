"""Pytest fixtures for docmark tests."""

import json

import pytest
from pathlib import Path

from docmark import config
from docmark.core.transformer import ContentTransformer
from docmark.rules import GFM_RULE_SET


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch: pytest.MonkeyPatch):
    """Give every test fresh settings built from a clean environment."""
    for name in ("DOCMARK_MAX_DEPTH", "DOCMARK_SYNTAX", "DOCMARK_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    config._settings = None
    yield
    config._settings = None


@pytest.fixture
def gfm() -> ContentTransformer:
    """Transformer using the GFM rule set."""
    return ContentTransformer(GFM_RULE_SET)


@pytest.fixture
def sample_document() -> dict:
    """Stored document JSON as the editor produces it."""
    return {
        "type": "doc",
        "content": [
            {
                "type": "heading",
                "attrs": {"level": 2},
                "content": [{"type": "text", "text": "Title"}],
            },
            {
                "type": "paragraph",
                "content": [
                    {"type": "text", "text": "Hello "},
                    {"type": "text", "text": "world", "marks": [{"type": "bold"}]},
                ],
            },
            {
                "type": "bulletList",
                "content": [
                    {
                        "type": "listItem",
                        "content": [
                            {"type": "paragraph", "content": [{"type": "text", "text": "one"}]}
                        ],
                    },
                    {
                        "type": "listItem",
                        "content": [
                            {"type": "paragraph", "content": [{"type": "text", "text": "two"}]}
                        ],
                    },
                ],
            },
        ],
    }


@pytest.fixture
def sample_markdown() -> str:
    """GFM rendering of sample_document."""
    return "\n## Title\n\nHello **world**\n\n- one\n- two\n"


@pytest.fixture
def tmp_document_file(tmp_path: Path, sample_document: dict) -> Path:
    """Write sample_document to a JSON file as the document store would."""
    file_path = tmp_path / "page.json"
    file_path.write_bytes(json.dumps(sample_document).encode("utf-8"))
    return file_path
