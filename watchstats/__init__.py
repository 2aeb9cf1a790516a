"""YouTube watch history statistics: import, enrichment and aggregation"""

__version__ = "0.1.0"
