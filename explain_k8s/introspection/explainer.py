"""
Kubectl Explainer - Builds the explanation forest for a list of resources.

For every resource: one recursive query, split into description and field
block, decomposition of the block, then enrichment of every field. Resources
run concurrently; a resource that fails is reported and left out of the
forest without affecting the others.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, List, Optional, Tuple

from explain_k8s.config import ExplainerConfig
from explain_k8s.errors import ConfigurationError, ExplainError
from explain_k8s.introspection.enrichment import EnrichmentEngine, FailurePolicy
from explain_k8s.introspection.kubectl_client import KubectlClient, SchemaSource
from explain_k8s.parser.document_splitter import DEFAULT_SKIP_LINES, split
from explain_k8s.parser.field_decomposer import decompose
from explain_k8s.parser.resource_names import clean_resource_names
from explain_k8s.schema.models import RESOURCE_KIND, ExplainReport, ExplanationNode, FieldWarning

logger = logging.getLogger(__name__)


class KubectlExplainer:
    """
    Explains Kubernetes resources into fully described field trees

    Usage:
    ```python
    explainer = KubectlExplainer(KubectlClient(timeout=30), max_workers=8)
    report = explainer.run(["pod", "service"])
    print(f"Explained {len(report.explanations)} resources")
    ```
    """

    def __init__(
        self,
        source: SchemaSource,
        max_workers: int = 8,
        policy: FailurePolicy = FailurePolicy.TOLERANT,
        skip_lines: int = DEFAULT_SKIP_LINES,
    ):
        """
        Initialize Kubectl Explainer

        Args:
            source: Schema source answering every query
            max_workers: Maximum number of concurrent external queries
            policy: Failure policy for single-field queries
            skip_lines: Lines to skip before a single-field description

        Raises:
            ConfigurationError: If max_workers is below 1
        """
        if max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {max_workers}")
        self.source = source
        self.max_workers = max_workers
        self.policy = FailurePolicy(policy)
        self.skip_lines = skip_lines

    @classmethod
    def from_config(cls, config: ExplainerConfig, source: Optional[SchemaSource] = None) -> "KubectlExplainer":
        """Create an explainer, backed by kubectl unless a source is given."""
        if source is None:
            source = KubectlClient(
                kubectl_path=config.kubectl_path,
                timeout=config.query_timeout,
                context=config.context,
            )
        return cls(
            source,
            max_workers=config.max_workers,
            policy=config.failure_policy,
            skip_lines=config.description_skip_lines,
        )

    def explain(self, resource_names: Iterable[str]) -> List[ExplanationNode]:
        """Return the explanation forest, sorted by resource name."""
        return self.run(resource_names).explanations

    def run(self, resource_names: Iterable[str]) -> ExplainReport:
        """
        Explain every resource and report what failed.

        Args:
            resource_names: Root resource names; blanks and duplicates are dropped

        Returns:
            ExplainReport: Sorted forest, failed resources and field warnings

        Raises:
            ConfigurationError: If no resource name remains after cleaning
        """
        names = clean_resource_names(resource_names)
        if not names:
            raise ConfigurationError("No resource names to explain")

        start = time.time()
        logger.info(f"===== Beginning explanation of {len(names)} resources =====")

        report = ExplainReport()
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="explain-query"
        ) as query_pool, ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(names)), thread_name_prefix="explain-resource"
        ) as resource_pool:
            engine = EnrichmentEngine(self.source, query_pool, self.policy, self.skip_lines)
            future_to_name = {
                resource_pool.submit(self.explain_resource, name, engine): name
                for name in names
            }

            for future in as_completed(future_to_name):
                name = future_to_name[future]
                try:
                    explanation, warnings = future.result()
                except ExplainError as e:
                    logger.error(f"Omitting resource {name}: {e}")
                    report.failed_resources[name] = str(e)
                    continue
                report.explanations.append(explanation)
                report.field_warnings.extend(warnings)

        report.explanations.sort(key=lambda node: node.name)
        report.field_warnings.sort(key=lambda warning: warning.full_name)
        report.elapsed_seconds = time.time() - start

        logger.info(
            f"===== Done: {len(report.explanations)} explained, "
            f"{len(report.failed_resources)} failed, "
            f"{len(report.field_warnings)} field warnings "
            f"in {report.elapsed_seconds:.2f}s ====="
        )
        return report

    def explain_resource(
        self,
        name: str,
        engine: EnrichmentEngine,
    ) -> Tuple[ExplanationNode, List[FieldWarning]]:
        """
        Explain one resource.

        Returns:
            (root node, warnings of fields whose description failed)

        Raises:
            StructuralParseError: If the resource document is malformed
            QueryFailure: If the recursive query fails, or any field query
                under the strict policy
        """
        logger.info(f'EXPLAINING "{name}"...')
        document = engine.fetch(name, recursive=True)
        description, field_block = split(document, full_name=name)

        warnings: List[FieldWarning] = []
        children = engine.enrich(decompose(field_block, name), name, warnings)

        explanation = ExplanationNode(
            name=name,
            full_name=name,
            kind=RESOURCE_KIND,
            description=description,
            children=children,
        )
        return explanation, warnings
