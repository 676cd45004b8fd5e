"""
Root pytest configuration.

This conftest is loaded before test collection to ensure
src is in the Python path for all imports.
"""

import sys
from pathlib import Path

# Add src to path IMMEDIATELY when this file is loaded
src_path = Path(__file__).parent / "src"
src_str = str(src_path.absolute())

if src_str in sys.path:
    sys.path.remove(src_str)
sys.path.insert(0, src_str)


import pytest


@pytest.fixture(autouse=True)
def _reset_cached_settings():
    """Drop cached settings and scoring profiles between tests for isolation."""
    from config.settings import get_settings
    from scoring.profiles import clear_profile_cache

    get_settings.cache_clear()
    clear_profile_cache()
    yield
    get_settings.cache_clear()
    clear_profile_cache()
