"""
Domain reads for staffdesk.

- resolve.py: name → document resolution with suggestions
- queries.py: QueryEngine (query_collection, getters, staff work history)
- recommend.py: staff recommendation by availability coverage
- analytics.py: aggregate counts and rankings
"""

from .analytics import ANALYTICS_TYPES, get_analytics
from .queries import QueryEngine
from .recommend import recommend_staff
from .resolve import resolve_by_name, suggest_names

__all__ = [
    "ANALYTICS_TYPES",
    "QueryEngine",
    "get_analytics",
    "recommend_staff",
    "resolve_by_name",
    "suggest_names",
]
