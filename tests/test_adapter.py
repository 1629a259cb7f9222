"""
Engine adapter: callback wiring, registration, rendering, error mapping
"""

import pytest

from agents.citation_formatter.adapter import CitationAdapter, render_bibliography
from agents.citation_formatter.errors import BadInput, EngineFailure, StyleError, UnsupportedLocale

ITEMS = {
    "a1": {"title": "T", "author": [{"family": "Doe", "given": "J"}]},
    "b2": {"title": "U"},
}


class TestCitationAdapter:
    def test_retrieve_known_item(self, locale_source):
        adapter = CitationAdapter(ITEMS, locale_source)
        assert adapter.retrieve_item("a1") is ITEMS["a1"]

    def test_unknown_item_is_none(self, locale_source):
        adapter = CitationAdapter(ITEMS, locale_source)
        assert adapter.retrieve_item("missing") is None

    def test_unhashable_id_is_none(self, locale_source):
        adapter = CitationAdapter(ITEMS, locale_source)
        assert adapter.retrieve_item(["a1"]) is None

    def test_english_locale_text(self, locale_source):
        adapter = CitationAdapter(ITEMS, locale_source)
        assert adapter.retrieve_locale("en-GB") == locale_source.lookup("en-US")

    def test_other_locale_raises(self, locale_source):
        adapter = CitationAdapter(ITEMS, locale_source)
        with pytest.raises(UnsupportedLocale):
            adapter.retrieve_locale("fr-FR")


class TestRenderBibliography:
    def test_registers_every_identifier_and_joins_fragments(self, fake_engine, locale_source):
        html = render_bibliography(ITEMS, "<style/>", locale_source=locale_source, engine_factory=fake_engine)
        assert html == "<div>a1</div><div>b2</div>"
        engine = fake_engine.instances[0]
        assert engine.registered == ["a1", "b2"]
        assert engine.locale == "en-US"
        assert engine.locale_text == locale_source.lookup("en-US")

    def test_style_bom_is_stripped(self, fake_engine, locale_source):
        render_bibliography(ITEMS, "\ufeff<style/>", locale_source=locale_source, engine_factory=fake_engine)
        assert fake_engine.instances[0].style == "<style/>"

    @pytest.mark.parametrize("style", [None, "", "   ", "\ufeff"])
    def test_missing_style_is_bad_input(self, fake_engine, locale_source, style):
        with pytest.raises(BadInput):
            render_bibliography(ITEMS, style, locale_source=locale_source, engine_factory=fake_engine)
        assert fake_engine.instances == []

    def test_unsupported_locale_propagates(self, fake_engine, locale_source):
        with pytest.raises(UnsupportedLocale) as exc_info:
            render_bibliography(ITEMS, "<style/>", locale="fr-FR", locale_source=locale_source,
                                engine_factory=fake_engine)
        assert exc_info.value.locale == "fr-FR"

    def test_style_error_stays_bad_input(self, locale_source):
        def broken_style(*args):
            raise StyleError("Could not parse CSL style: boom")

        with pytest.raises(BadInput, match="boom"):
            render_bibliography(ITEMS, "<style", locale_source=locale_source, engine_factory=broken_style)

    def test_engine_error_becomes_engine_failure(self, fake_engine, locale_source, monkeypatch):
        def explode(self):
            raise ValueError("no bibliography layout")

        monkeypatch.setattr(fake_engine, "render_bibliography", explode)
        with pytest.raises(EngineFailure, match="no bibliography layout"):
            render_bibliography(ITEMS, "<style/>", locale_source=locale_source, engine_factory=fake_engine)

    def test_empty_items_render_empty(self, fake_engine, locale_source):
        assert render_bibliography({}, "<style/>", locale_source=locale_source, engine_factory=fake_engine) == ""
        assert fake_engine.instances[0].registered == []
