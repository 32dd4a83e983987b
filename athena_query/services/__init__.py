"""
Services Package
Orchestration layer over the core pipeline
"""

from athena_query.services.query_service import AthenaQueryService, query_cost_usd

__all__ = [
    "AthenaQueryService",
    "query_cost_usd",
]
