"""Mini README: Core package initializer for the cashflow ledger.

The package tracks one player's finances through a Cashflow board-game
session. The ``ledger`` subpackage holds the state record and the rules;
``interface`` exposes them over HTTP. Only the logging helper is
re-exported here so importing the package stays free of web dependencies.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
