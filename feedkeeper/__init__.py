"""
feedkeeper: single-feed ingestion service with a posted/unposted workflow.
"""

__version__ = "1.0.0"
