import re
from typing import Optional

from .errors import UnsupportedLocale

BOM = "\ufeff"

_ENGLISH_TAG = re.compile(r"^en(?:[-_][A-Za-z0-9]+)*$", re.IGNORECASE)


def strip_bom(text: str) -> str:
    if text and text.startswith(BOM):
        return text[len(BOM):]
    return text


# Accepts "en", "en-US", "en_GB", "EN-au"...
def is_english_locale(tag: Optional[str]) -> bool:
    if not isinstance(tag, str):
        return False
    return bool(_ENGLISH_TAG.match(tag.strip()))


class EnglishLocaleSource:
    """Serves the configured English locale document for English-family tags.

    Either ``text`` is given directly or the file at ``path`` is read on the
    first successful lookup, or up front by calling ``load``. Any other tag
    raises ``UnsupportedLocale``.
    """

    def __init__(self, path: Optional[str] = None, text: Optional[str] = None):
        if path is None and text is None:
            raise ValueError("EnglishLocaleSource needs a path or text")
        self.path = path
        self._text = strip_bom(text) if text is not None else None

    def load(self) -> str:
        if self._text is None:
            with open(self.path, encoding="utf-8") as f:
                self._text = strip_bom(f.read())
        return self._text

    def lookup(self, tag: Optional[str]) -> str:
        if not is_english_locale(tag):
            raise UnsupportedLocale(tag)
        return self.load()
