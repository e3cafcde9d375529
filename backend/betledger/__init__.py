"""betledger: fixed-odds sports betting ledger API."""

__version__ = "0.1.0"

__all__ = ["__version__"]
