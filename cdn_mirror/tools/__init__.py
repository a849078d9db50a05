# cdn_mirror/tools/__init__.py
"""
CDN mirror tools package

Exports only modules that live under `cdn_mirror/tools`:
  - parse_seed_text / SeedRunner / build_seed_response   (from .seed)

Anything under `cdn_mirror/core` should be imported from its own package.
"""

from __future__ import annotations

from .seed import SeedRunner, build_seed_response, parse_seed_text

__all__ = ["parse_seed_text", "SeedRunner", "build_seed_response"]
