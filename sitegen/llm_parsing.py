from __future__ import annotations

import re
from typing import Optional

_FENCED_BLOCK_RE = re.compile(r"```(?:html)?\n([\s\S]+?)\n```")
_HTML_DOCUMENT_RE = re.compile(r"<!DOCTYPE html[\s\S]+?</html>", re.IGNORECASE)


def extract_code(text: Optional[str]) -> str:
    """Recover the single HTML document embedded in a model reply.

    Strategy, first hit wins:
    - The first ``` fenced block (optionally tagged html): its interior, trimmed.
    - The first <!DOCTYPE html ...> through the nearest </html>, case-insensitive, verbatim.
    - Otherwise the whole reply, trimmed.

    Never raises and never checks that the result is valid markup.
    """
    t = text or ""
    m = _FENCED_BLOCK_RE.search(t)
    if m:
        return m.group(1).strip()
    m = _HTML_DOCUMENT_RE.search(t)
    if m:
        return m.group(0)
    return t.strip()
