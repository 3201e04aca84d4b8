from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from diceware.wordlist import get_wordlist_path

logger = logging.getLogger(__name__)

DEFAULT_WORDLIST = "en_eff"


class WordlistError(Exception):
    """Raised when a passphrase wordlist cannot be located or is empty."""


@lru_cache(maxsize=8)
def load_wordlist(name: str = DEFAULT_WORDLIST, path: str | None = None) -> tuple[str, ...]:
    """Load a diceware wordlist once and cache it.

    *path* points at a custom file and wins over *name*, which selects one
    of the lists bundled with the ``diceware`` distribution. Lines may
    carry a dice-number prefix (``11111<TAB>abacus``); only the last token
    of each non-blank line is kept.
    """
    if path:
        source = Path(path)
    else:
        try:
            located = get_wordlist_path(name)
        except ValueError as exc:
            raise WordlistError(f"Invalid wordlist name: {name}") from exc
        if not located:
            raise WordlistError(f"Unknown wordlist: {name}")
        source = Path(located)

    try:
        with source.open(encoding="utf-8") as handle:
            words = [line.split()[-1] for line in handle if line.strip()]
    except OSError as exc:
        raise WordlistError(f"Cannot read wordlist {source}: {exc}") from exc

    if not words:
        raise WordlistError(f"Wordlist {source} is empty")

    logger.info("Loaded %d passphrase words from %s", len(words), source)
    return tuple(words)
