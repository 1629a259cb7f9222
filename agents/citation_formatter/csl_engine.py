import copy
import io
import logging
import warnings
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from citeproc import Citation, CitationItem, CitationStylesBibliography, CitationStylesStyle, formatter
from citeproc.frontend import CitationStylesXML
from citeproc.source.json import CiteProcJSON

from .errors import StyleError

_logger = logging.getLogger(__name__)

DEFAULT_ITEM_TYPE = "article"
BIB_START = '<div class="csl-bib-body">\n'
BIB_END = "</div>"


class CitationSystem(Protocol):
    """Callbacks the engine uses to pull data on demand."""

    def retrieve_item(self, item_id: str) -> Optional[Dict[str, Any]]: ...

    def retrieve_locale(self, tag: str) -> str: ...


def _to_bytes(text: str) -> bytes:
    return text.encode("utf-8") if isinstance(text, str) else text


# Map a normalized item onto the CSL-JSON record citeproc-py parses
def to_csl_json(key: str, item: Dict[str, Any]) -> Dict[str, Any]:
    record = copy.deepcopy(dict(item))
    record["id"] = key
    if not record.get("type"):
        record["type"] = DEFAULT_ITEM_TYPE
    return record


# citeproc-py lowercases reference keys, so records are keyed by position
def _internal_key(index: int) -> str:
    return f"item-{index}"


def _entry_fragment(entry: Any) -> str:
    return f'  <div class="csl-entry">{entry}</div>\n'


class CiteprocEngine:
    """Bibliography engine backed by citeproc-py.

    Mirrors the citeproc-js calling convention: build it with a callback
    object and a style document, declare the active items with
    ``register_items`` and then call ``render_bibliography``, which returns
    ``(metadata, fragments)``.
    """

    def __init__(self, sys: CitationSystem, style: str, locale: Optional[str] = None,
                 suppress_warnings: bool = False):
        self.sys = sys
        self.suppress_warnings = suppress_warnings
        try:
            with self._warnings():
                self.style = CitationStylesStyle(io.BytesIO(_to_bytes(style)), locale=locale, validate=False)
        except Exception as e:
            raise StyleError(f"Could not parse CSL style: {e}") from e
        self.locale = locale or self.style.root.get("default-locale") or "en-US"
        self._install_locale(self.sys.retrieve_locale(self.locale))
        self._bibliography: Optional[CitationStylesBibliography] = None
        self.entry_ids: List[str] = []
        self.unresolved_ids: List[str] = []
        self._keys: Dict[str, str] = {}

    @contextmanager
    def _warnings(self):
        with warnings.catch_warnings():
            if self.suppress_warnings:
                warnings.simplefilter("ignore")
            yield

    # Put the supplied locale ahead of citeproc's bundled locale files
    def _install_locale(self, text: str) -> None:
        locale_root = CitationStylesXML(io.BytesIO(_to_bytes(text)), validate=False).root
        locales = self.style.root.locales
        # match the back-reference citeproc keeps on its own locale roots
        if locales and hasattr(locales[-1], "style"):
            locale_root.style = locales[-1].style
        # in-style <locale> overrides live inside the style tree and keep precedence
        position = next((i for i, loc in enumerate(locales) if loc.getparent() is None), len(locales))
        locales.insert(position, locale_root)

    def register_items(self, item_ids: Sequence[str]) -> None:
        records: List[Dict[str, Any]] = []
        self.entry_ids = []
        self.unresolved_ids = []
        self._keys = {}
        for item_id in item_ids:
            item = self.sys.retrieve_item(item_id)
            if item is None:
                self.unresolved_ids.append(item_id)
                if not self.suppress_warnings:
                    _logger.warning(f"Reference with ID '{item_id}' not found")
                continue
            key = _internal_key(len(records))
            records.append(to_csl_json(key, item))
            self._keys[key] = item_id
            self.entry_ids.append(item_id)

        with self._warnings():
            source = CiteProcJSON(records)
            bibliography = CitationStylesBibliography(self.style, source, formatter.html)
            for key in self._keys:
                bibliography.register(Citation([CitationItem(key)]))
        self._bibliography = bibliography

    def render_bibliography(self) -> Tuple[Dict[str, Any], List[str]]:
        if self._bibliography is None:
            raise RuntimeError("register_items must be called before render_bibliography")
        if not self.style.has_bibliography():
            raise RuntimeError("CSL style does not define a bibliography")
        with self._warnings():
            self._bibliography.sort()
            entries = self._bibliography.bibliography()
            self.entry_ids = [self._keys[item.key] for item in self._bibliography.items]
        fragments = [_entry_fragment(entry) for entry in entries]
        metadata = {
            "maxoffset": 0,
            "entry_ids": [[item_id] for item_id in self.entry_ids],
            "bibstart": BIB_START,
            "bibend": BIB_END,
            "bibliography_errors": [],
            "unresolved_ids": list(self.unresolved_ids),
        }
        return metadata, fragments
