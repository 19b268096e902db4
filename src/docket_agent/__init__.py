"""
Docket Agent - Voice-note driven case management.
Resolves lawyers' voice-note updates into case record, calendar and email actions.
"""

__version__ = "1.0.0"

# Import function to avoid circular dependencies at module level
def create_app():
    """Lazy import of create_app to avoid dependency issues"""
    from .api import create_app as _create_app
    return _create_app()

# Import settings directly since it has minimal dependencies
from .config import settings

__all__ = ["create_app", "settings"]
