from __future__ import annotations

import re

_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
}

_ENTITY_RE = re.compile("|".join(re.escape(k) for k in _ENTITIES))


def decode_entities(text: str) -> str:
    """
    Replace the five standard HTML character references with their literal characters.

    One left-to-right pass: "&amp;lt;" becomes "&lt;", not "<". Anything else
    (numeric references, named entities beyond these five) is left untouched.
    """
    if not text:
        return text
    return _ENTITY_RE.sub(lambda m: _ENTITIES[m.group(0)], text)
