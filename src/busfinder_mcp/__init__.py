"""BusFinder MCP - route matching and journey planning over a static bus dataset."""

__version__ = "0.1.0"
