"""
API package exposing the voice-note workflow over HTTP.
"""

from .app import create_app

__all__ = ["create_app"]
