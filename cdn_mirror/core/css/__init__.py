# cdn_mirror/core/css/__init__.py
from .crawler import CssDependencyCrawler
from .mirrors import MirrorRule, MirrorStrategy, default_rules, url_template
from .references import extract_css_references

__all__ = [
    "CssDependencyCrawler",
    "MirrorRule",
    "MirrorStrategy",
    "default_rules",
    "url_template",
    "extract_css_references",
]
