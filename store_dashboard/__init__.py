"""
Store Sales Dashboard

Synthetic retail sales generation, aggregation and ranking core,
served to the dashboard frontend over a JSON API.
"""

__version__ = "1.0.0"
