"""BetDesk: sports-betting demo backend with an odds feed and settlement engine."""

__version__ = "0.1.0"

__all__ = ["__version__"]
