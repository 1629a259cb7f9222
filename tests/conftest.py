"""
Shared fixtures: fake citation engine, locale sources, sample style.
"""

from pathlib import Path

import pytest

from agents.citation_formatter.config import Settings
from agents.citation_formatter.locales import EnglishLocaleSource

STYLE_PATH = Path(__file__).resolve().parents[1] / "agents" / "citation_formatter" / "csl" / "minimal-author-title.csl"

ENGLISH_LOCALE_TEXT = '<locale xmlns="http://purl.org/net/xbiblio/csl" version="1.0" xml:lang="en-US"/>'


class FakeEngine:
    """Stands in for the citeproc engine; records what the adapter asks of it."""

    instances = []

    def __init__(self, sys, style, locale=None, suppress_warnings=False):
        self.sys = sys
        self.style = style
        self.locale = locale
        self.suppress_warnings = suppress_warnings
        self.locale_text = sys.retrieve_locale(locale)
        self.registered = None
        self.resolved = {}
        FakeEngine.instances.append(self)

    def register_items(self, item_ids):
        self.registered = list(item_ids)
        self.resolved = {i: self.sys.retrieve_item(i) for i in item_ids}

    def render_bibliography(self):
        fragments = [f"<div>{item_id}</div>" for item_id, item in self.resolved.items() if item is not None]
        return {"entry_ids": [[i] for i in self.resolved]}, fragments


@pytest.fixture
def fake_engine():
    FakeEngine.instances = []
    yield FakeEngine
    FakeEngine.instances = []


@pytest.fixture
def locale_source():
    return EnglishLocaleSource(text="\ufeff" + ENGLISH_LOCALE_TEXT)


@pytest.fixture
def minimal_style():
    return STYLE_PATH.read_text(encoding="utf-8")


@pytest.fixture
def settings():
    return Settings(max_body_bytes=4096)
