# (c) Copyright IBM Corp. 2025

"""
tracewire: W3C trace context and baggage propagation, and thread-safe metric
aggregation.
"""

from tracewire.version import VERSION

__version__ = VERSION
