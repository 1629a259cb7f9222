import logging
from typing import Any, Callable, Mapping, Optional

from .config import get_settings
from .csl_engine import CiteprocEngine
from .errors import BadInput, EngineFailure, FormatterError
from .locales import EnglishLocaleSource, strip_bom

_logger = logging.getLogger(__name__)

EngineFactory = Callable[..., Any]


class CitationAdapter:
    """Callback pair handed to the citation engine for one request.

    The engine decides when to call ``retrieve_item`` and ``retrieve_locale``;
    both only read the request's normalized items and locale source.
    """

    def __init__(self, items: Mapping[str, Any], locale_source: EnglishLocaleSource):
        self.items = items
        self.locale_source = locale_source

    # Unknown ids are unresolved citations, not errors
    def retrieve_item(self, item_id: str) -> Optional[Any]:
        try:
            return self.items.get(item_id)
        except TypeError:
            return None

    def retrieve_locale(self, tag: str) -> str:
        return self.locale_source.lookup(tag)


def render_bibliography(
    items: Mapping[str, Any],
    style: str,
    locale: str = "en-US",
    locale_source: Optional[EnglishLocaleSource] = None,
    engine_factory: EngineFactory = CiteprocEngine,
    suppress_warnings: bool = False,
) -> str:
    """Drive the engine through registration and rendering for ``items``.

    ``items`` must already be normalized. Returns the bibliography HTML, the
    engine's fragments joined in order. Raises ``BadInput`` for a missing or
    unparseable style, ``UnsupportedLocale`` for non-English locales and
    ``EngineFailure`` for anything else the engine raises.
    """
    style = strip_bom(style) if isinstance(style, str) else style
    if not style or not str(style).strip():
        raise BadInput("Missing style")
    if locale_source is None:
        locale_source = EnglishLocaleSource(path=get_settings().english_locale_path)

    adapter = CitationAdapter(items, locale_source)
    try:
        _logger.info("Instantiating citeproc Engine...")
        engine = engine_factory(adapter, style, locale, suppress_warnings)
        engine.register_items(list(items.keys()))
        _logger.info("Items updated in citeproc Engine.")
        _meta, fragments = engine.render_bibliography()
    except FormatterError:
        raise
    except Exception as e:
        raise EngineFailure(str(e)) from e
    return "".join(fragments)
