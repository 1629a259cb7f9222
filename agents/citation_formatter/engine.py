import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional, Protocol, Tuple

_logger = logging.getLogger(__name__)

NAME_FIELDS = ("family", "given", "literal")


class SanitizationObserver(Protocol):
    def authors_filtered(self, item_id: str, before: int, after: int) -> None: ...

    def sanitization_complete(self, items_received: int, authors_kept: int) -> None: ...


class LoggingSanitizationObserver:
    """Reports sanitization counts through the module logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or _logger

    def authors_filtered(self, item_id: str, before: int, after: int) -> None:
        self.logger.info(f"Filtered authors for item {item_id}: {before} -> {after}")

    def sanitization_complete(self, items_received: int, authors_kept: int) -> None:
        self.logger.info(
            f"CSL sanitization complete. Items received: {items_received}. Authors authorized: {authors_kept}"
        )


# An author entry is usable when any of its name parts is filled
def is_named_author(entry: Any) -> bool:
    if not isinstance(entry, Mapping):
        return False
    return any(entry.get(field) for field in NAME_FIELDS)


# Drop unnamed author entries from one item, keeping everything else as-is
def normalize_item(item: Any) -> Tuple[Any, int, int]:
    """Return ``(item, authors_before, authors_after)``.

    Items without a list-valued ``author`` come back untouched with both
    counts at zero. Otherwise a shallow copy is returned whose ``author``
    keeps only named entries, in their original order.
    """
    if not isinstance(item, Mapping):
        return item, 0, 0
    authors = item.get("author")
    if not isinstance(authors, (list, tuple)):
        return item, 0, 0
    kept = [a for a in authors if is_named_author(a)]
    normalized = dict(item)
    normalized["author"] = kept
    return normalized, len(authors), len(kept)


# Sanitize every item of a request before it reaches the citation engine
def normalize_items(items: Mapping, observer: Optional[SanitizationObserver] = None) -> Dict[str, Any]:
    normalized: Dict[str, Any] = {}
    authors_kept = 0
    for item_id, item in items.items():
        clean, before, after = normalize_item(item)
        authors_kept += after
        if observer is not None and before != after:
            observer.authors_filtered(item_id, before, after)
        normalized[item_id] = clean
    if observer is not None:
        observer.sanitization_complete(len(normalized), authors_kept)
    return normalized
