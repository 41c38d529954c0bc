"""
Schema Introspection Module

Turns ``kubectl explain`` output into fully described field trees.
Supports:
- Recursive and single-field kubectl queries with timeouts
- Concurrent description lookups on a bounded pool
- Tolerant or strict handling of failed field queries
- Deterministic, name-sorted output
"""

from .kubectl_client import KubectlClient, SchemaSource
from .enrichment import EnrichmentEngine, FailurePolicy
from .explainer import KubectlExplainer

__all__ = [
    "KubectlClient",
    "SchemaSource",
    "EnrichmentEngine",
    "FailurePolicy",
    "KubectlExplainer",
]
