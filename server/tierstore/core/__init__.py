from tierstore.core.logging import setup_logging
from tierstore.core.settings import Settings, get_settings

__all__ = ["Settings", "get_settings", "setup_logging"]
