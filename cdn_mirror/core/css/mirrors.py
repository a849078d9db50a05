# cdn_mirror/core/css/mirrors.py
"""
Fallback source lists for CSS sub-resources.

A MirrorStrategy maps URL-path conventions (compiled patterns) to template
generators. For a matched URL, every template is rendered with the captured
package/version/rest and appended after the primary URL.

Default convention: a `name@version` segment (npm scope allowed), optionally
preceded by `css/` or `npm/`, e.g.

  /npm/bootstrap-icons@1.11.3/font/fonts/bootstrap-icons.woff2
  /@fortawesome/fontawesome-free@6.5.1/webfonts/fa-solid-900.woff2
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from urllib.parse import urlparse

# (package, version, rest) -> url
TemplateFn = Callable[[str, str, str], str]

SCOPED_PACKAGE_RE = re.compile(
    r"^/(?:(?:css|npm)/)?(?P<package>(?:@[^/@]+/)?[^/@]+)@(?P<version>[^/]+)/(?P<rest>.+)$"
)


def url_template(template: str) -> TemplateFn:
    """Template generator from a format string with {package}, {version}, {rest}."""

    def _render(package: str, version: str, rest: str) -> str:
        return template.format(package=package, version=version, rest=rest)

    return _render


JSDELIVR_NPM = url_template("https://cdn.jsdelivr.net/npm/{package}@{version}/{rest}")
UNPKG = url_template("https://unpkg.com/{package}@{version}/{rest}")


@dataclass(frozen=True)
class MirrorRule:
    pattern: re.Pattern[str]
    templates: Sequence[TemplateFn] = field(default_factory=tuple)

    def render(self, url_path: str) -> list[str]:
        m = self.pattern.match(url_path)
        if not m:
            return []
        package, version, rest = m.group("package"), m.group("version"), m.group("rest")
        return [t(package, version, rest) for t in self.templates]


class MirrorStrategy:
    """Ordered rules; the first rule whose pattern matches supplies the mirrors."""

    def __init__(self, rules: Sequence[MirrorRule] | None = None) -> None:
        self.rules: list[MirrorRule] = list(rules) if rules is not None else default_rules()

    def candidates(self, primary_url: str) -> list[str]:
        """Primary URL first, then distinct mirror URLs in template order."""
        out = [primary_url]
        path = urlparse(primary_url).path
        for rule in self.rules:
            rendered = rule.render(path)
            if not rendered:
                continue
            for u in rendered:
                if u not in out:
                    out.append(u)
            break
        return out


def default_rules() -> list[MirrorRule]:
    return [MirrorRule(pattern=SCOPED_PACKAGE_RE, templates=(JSDELIVR_NPM, UNPKG))]


__all__ = [
    "TemplateFn",
    "SCOPED_PACKAGE_RE",
    "url_template",
    "JSDELIVR_NPM",
    "UNPKG",
    "MirrorRule",
    "MirrorStrategy",
    "default_rules",
]
