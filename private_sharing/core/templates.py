"""Shared template configuration for web routes"""

from fastapi.templating import Jinja2Templates

from private_sharing.core.config import PACKAGE_DIR

# Create shared templates instance
templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))

# Export for use in routes
__all__ = ["templates"]
