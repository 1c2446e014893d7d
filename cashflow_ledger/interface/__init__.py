"""Mini README: Outer interfaces for the cashflow ledger.

Exports the FastAPI application factory that serves the ledger session as a
JSON API. Presentation (screens, dialogs) lives in clients of this API.
"""

from .web_app import create_application

__all__ = ["create_application"]
