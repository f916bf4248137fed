"""Channel name canonicalization.

Operators type channel names by hand on both sides ("Loja-Centro" in Chatwoot,
"lojacentro" on the gateway), so names are compared by a canonical key rather
than verbatim. The key is exact: no fuzzy or edit-distance matching.
"""

import re

_SEPARATORS = re.compile(r"[-\s_]")
_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_name(raw: str | None) -> str:
    """Lower-case, drop separators, then drop everything outside [a-z0-9].

    Total and idempotent. Accented letters are dropped, not transliterated:
    "Promoção" → "promoo".
    """
    if not raw:
        return ""
    return _NON_ALNUM.sub("", _SEPARATORS.sub("", raw.lower()))


def names_match(left: str | None, right: str | None) -> bool:
    """True iff both names share the same non-empty key."""
    key = normalize_name(left)
    return bool(key) and key == normalize_name(right)
