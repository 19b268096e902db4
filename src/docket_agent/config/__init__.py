"""
Configuration package for the voice-note case workflow.
"""

from .settings import settings, Settings, get_record_url

__all__ = ["settings", "Settings", "get_record_url"]
