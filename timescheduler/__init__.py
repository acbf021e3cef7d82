"""
Availability scheduling engine: slot generation and booking bookkeeping for a day.
"""

__version__ = "0.1.0"
