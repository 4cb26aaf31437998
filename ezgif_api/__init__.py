"""
EZGIF API facade.

This package provides the reachability check against ezgif.com and the /api/convert
dispatcher that acknowledges conversion requests for a fixed set of actions.
"""

__version__ = "1.0.0"
