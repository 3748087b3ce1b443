"""Input checks applied by controllers before a use case runs."""

import re

# Letters (any script), digits, spaces and a handful of harmless punctuation.
_SAFE_RE = re.compile(r"^[\w .,'()\-]+$")
_MAX_LENGTH = 100


def is_safe(value) -> bool:
    """
    Return True when *value* is a non-blank string without markup or
    control characters.

    Rejects anything that could be interpreted as HTML/script
    (``<``, ``>``, quotes other than the apostrophe, ``;``, ``{``/``}``, …)
    and strings longer than 100 characters.
    """
    if not isinstance(value, str):
        return False
    stripped = value.strip()
    if not stripped or len(stripped) > _MAX_LENGTH:
        return False
    return bool(_SAFE_RE.match(stripped))
