"""Layered configuration resolver.

Discovers configuration files across search locations, filters them by
profile, and merges them into an ordered property source chain.
"""

__version__ = "0.1.0"
