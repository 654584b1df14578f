"""Limit order book with price-time priority matching, an order-file generator and a benchmark report."""

__version__ = "0.1.0"
__all__ = ["book", "generate", "demo"]