# cdn_mirror/core/css/references.py
"""
url(...) extraction from stylesheet text.

Only url() tokens are considered. A bare @import "x.css" is not followed.
"""

from __future__ import annotations

import re

# url(foo), url('foo'), url( "foo" )
_CSS_URL_RE = re.compile(r"url\(\s*(['\"]?)(?P<u>[^)'\"]*?)\1\s*\)", re.IGNORECASE)


def _fetchable(ref: str) -> bool:
    if not ref:
        return False
    low = ref.lower()
    if low.startswith("data:"):
        return False
    if ref.startswith("#"):
        # SVG filter/fragment references: url(#clip)
        return False
    return True


def extract_css_references(text: str) -> list[str]:
    """Unique url() references in first-seen order, minus inline data: URIs."""
    seen: set[str] = set()
    out: list[str] = []
    for m in _CSS_URL_RE.finditer(text):
        ref = m.group("u").strip()
        if not _fetchable(ref) or ref in seen:
            continue
        seen.add(ref)
        out.append(ref)
    return out


__all__ = ["extract_css_references"]
