# tests/__init__.py
"""
Expose common test utilities so tests can import directly:
    from tests import FakeSession, make_config
"""

from .utils import FakeResp, FakeSession, make_config, write_cached

__all__ = ["FakeResp", "FakeSession", "make_config", "write_cached"]
