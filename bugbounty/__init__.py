"""
Bug bounty platform API.

Companies publish programs, researchers submit vulnerability reports,
and every request is checked against role and ownership rules.
"""

__version__ = "1.0.0"
