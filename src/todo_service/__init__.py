"""
FastAPI Todo Service package.

The application object lives in `todo_service.main`; import it from there
(`from todo_service.main import app`) so that importing the package alone has
no side effects.
"""

__version__ = "0.1.0"
