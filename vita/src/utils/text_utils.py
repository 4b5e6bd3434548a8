"""
Vita - Text Utilities
======================
Helper functions for text cleaning and source labelling.

These utilities are consumed by the ``IngestionPipeline`` and should
remain stateless and side-effect-free.
"""

from __future__ import annotations

import re
import unicodedata
from pathlib import Path


# Removed before chunking: C0/C1 controls other than \n, \r, \t, and the
# BOM, zero-width, soft-hyphen and direction marks that client profiles
# pasted from word processors or messaging apps tend to carry.
_NON_PRINTABLE_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\ufeff\u200b\u200c\u200d\u200e\u200f\u00ad\u2060\ufffe]")


def clean_text(text: str) -> str:
    """
    Normalise a client profile so chunks embed and read back as plain lines.

    NFC-normalises, drops the characters matched by ``_NON_PRINTABLE_RE``,
    squeezes horizontal whitespace while keeping line breaks, trims every
    line and caps blank-line runs at one empty line.  The retriever hands
    chunk text to the prompt verbatim, so this is the only place profile
    text is tidied.
    """
    text = unicodedata.normalize("NFC", text)
    text = _NON_PRINTABLE_RE.sub("", text)
    text = re.sub(r"[^\S\n]+", " ", text)
    lines = [line.strip() for line in text.splitlines()]
    text = "\n".join(lines)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def source_label(path: Path | str) -> str:
    """
    Default ``source`` metadata for a file: ``./<filename>``.

    Examples::

        "context/client.txt"       → "./client.txt"
        "/data/notes/Plan v2.md"   → "./Plan v2.md"
    """
    return f"./{Path(path).name}"
