"""
Enrichment Engine - Fills every parsed field with its own description.

A recursive ``kubectl explain`` document lists the whole field tree but no
field descriptions, so each field is queried once more by its fully-qualified
name. Queries run on a shared, bounded thread pool. The calling thread submits
all sibling queries of a level before that level waits on any of them, and
only the calling thread waits, so pool workers never block on other pool tasks.
Any error raised by the schema source is reported as a QueryFailure.
"""

import logging
from concurrent.futures import Executor, Future
from enum import Enum
from typing import List, Optional, Tuple

from explain_k8s.errors import ExplainError, QueryFailure
from explain_k8s.introspection.kubectl_client import SchemaSource
from explain_k8s.parser.document_splitter import DEFAULT_SKIP_LINES, extract_field_description
from explain_k8s.parser.field_decomposer import decompose
from explain_k8s.schema.models import ExplanationNode, FieldEntry, FieldWarning, is_structured_kind

logger = logging.getLogger(__name__)


class FailurePolicy(str, Enum):
    """What a failed field query does to its resource"""
    TOLERANT = "tolerant"  # empty description + warning
    STRICT = "strict"  # abort the resource


class EnrichmentEngine:
    """Queries field descriptions concurrently and assembles sorted subtrees"""

    def __init__(
        self,
        source: SchemaSource,
        executor: Executor,
        policy: FailurePolicy = FailurePolicy.TOLERANT,
        skip_lines: int = DEFAULT_SKIP_LINES,
    ):
        """
        Initialize Enrichment Engine

        Args:
            source: Schema source answering the queries
            executor: Bounded pool running every external query
            policy: Failure policy for single-field queries
            skip_lines: Lines to skip before a single-field description
        """
        self.source = source
        self.executor = executor
        self.policy = FailurePolicy(policy)
        self.skip_lines = skip_lines

    def fetch(self, full_name: str, recursive: bool = False) -> str:
        """Run one query on the pool and wait for its document."""
        return self.executor.submit(self.query, full_name, recursive).result()

    def query(self, full_name: str, recursive: bool = False) -> str:
        """Query the source, turning any unexpected error into a QueryFailure."""
        try:
            return self.source.query(full_name, recursive=recursive)
        except ExplainError:
            raise
        except Exception as e:
            raise QueryFailure(
                f"Query for {full_name} raised {type(e).__name__}: {e}",
                full_name=full_name,
            ) from e

    def describe(self, full_name: str) -> str:
        """Query a single field and extract its description. Runs on the pool."""
        logger.info(f" - {full_name}")
        document = self.query(full_name)
        return extract_field_description(document, self.skip_lines)

    def enrich(
        self,
        entries: List[FieldEntry],
        parent_full_name: str,
        warnings: Optional[List[FieldWarning]] = None,
    ) -> List[ExplanationNode]:
        """
        Build explained nodes for the fields of one block.

        Args:
            entries: Fields produced by ``decompose`` for this block
            parent_full_name: Fully-qualified name owning the block
            warnings: List receiving a FieldWarning per failed query. Only the
                calling thread appends to it.

        Returns:
            List[ExplanationNode]: Nodes sorted by name, children resolved

        Raises:
            StructuralParseError: If a nested block is malformed
            QueryFailure: If a field query fails under the strict policy
        """
        if warnings is None:
            warnings = []
        if not entries:
            return []

        logger.debug(f"Enriching {len(entries)} fields under {parent_full_name}")

        pending: List[Tuple[FieldEntry, Future]] = [
            (entry, self.executor.submit(self.describe, entry.full_name))
            for entry in entries
        ]

        nodes = []
        try:
            for entry, future in pending:
                children: List[ExplanationNode] = []
                if entry.has_nested_fields():
                    children = self.enrich(
                        decompose(entry.nested_block, entry.full_name),
                        entry.full_name,
                        warnings,
                    )
                elif is_structured_kind(entry.kind):
                    logger.debug(f"{entry.full_name} is {entry.kind} but lists no nested fields")

                nodes.append(
                    ExplanationNode(
                        name=entry.name,
                        full_name=entry.full_name,
                        kind=entry.kind,
                        description=self._collect_description(entry, future, warnings),
                        children=children,
                    )
                )
        except Exception:
            # Queries not started yet are dropped with the failed subtree
            for _, future in pending:
                future.cancel()
            raise

        nodes.sort(key=lambda node: node.name)
        return nodes

    def _collect_description(
        self,
        entry: FieldEntry,
        future: Future,
        warnings: List[FieldWarning],
    ) -> str:
        """Wait for a description, applying the failure policy."""
        try:
            return future.result()
        except QueryFailure as e:
            if self.policy is FailurePolicy.STRICT:
                raise
            logger.warning(f"Could not describe {entry.full_name}: {e}")
            warnings.append(FieldWarning(full_name=entry.full_name, message=str(e)))
            return ""
