"""Explain K8s Generator - kubectl explain output as fully described JSON trees."""

__version__ = "0.1.0"

from explain_k8s.errors import ConfigurationError, ExplainError, QueryFailure, StructuralParseError
from explain_k8s.introspection import EnrichmentEngine, FailurePolicy, KubectlClient, KubectlExplainer, SchemaSource
from explain_k8s.schema.models import ExplainReport, ExplanationNode, FieldEntry, FieldWarning

__all__ = [
    "ConfigurationError",
    "EnrichmentEngine",
    "ExplainError",
    "ExplainReport",
    "ExplanationNode",
    "FailurePolicy",
    "FieldEntry",
    "FieldWarning",
    "KubectlClient",
    "KubectlExplainer",
    "QueryFailure",
    "SchemaSource",
    "StructuralParseError",
]
