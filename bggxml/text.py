# bggxml/text.py
"""
Repairs BGG's double-encoded text fields.

BGG escapes the individual UTF-8 bytes of non-ASCII characters as numeric
character references, so "Glück" goes over the wire as ``Gl&#195;&#188;ck``.
A conforming XML parser turns each reference into one code point and yields
"GlÃ¼ck". In ``EntityMode.CORRECTED`` every run of U+0080..U+00FF code points
that spells a valid UTF-8 sequence when read back as Latin-1 bytes is decoded
as UTF-8. Entities are never unescaped a second time.
"""
import enum
import re
from typing import Optional

# A UTF-8 lead byte followed by at least one continuation byte, as Latin-1 code points.
_MOJIBAKE_RUN = re.compile("[Â-ô][\u0080-¿]+")


class EntityMode(enum.Enum):
    """How text fields are post-processed after XML parsing."""

    CORRECTED = "corrected"
    VERBATIM = "verbatim"


def _repair_run(match: "re.Match[str]") -> str:
    run = match.group(0)
    try:
        return run.encode("latin-1").decode("utf-8")
    except UnicodeDecodeError:
        return run


def repair_double_encoding(value: str) -> str:
    """Reinterprets Latin-1-as-UTF-8 runs in ``value``; other text is left alone."""
    if not value.isascii():
        return _MOJIBAKE_RUN.sub(_repair_run, value)
    return value


def fix_text(value: Optional[str], mode: EntityMode = EntityMode.CORRECTED) -> Optional[str]:
    if value is None or mode is EntityMode.VERBATIM:
        return value
    return repair_double_encoding(value)
