"""
IBKR Signal Bridge - webhook signal to market order execution

Receives a trading signal (typically a TradingView alert), places a single
market order through the Interactive Brokers Client Portal API and records
the outcome in a JSON trade history file.
"""

__version__ = "0.1.0"
__author__ = "IBKR Bridge Team"
