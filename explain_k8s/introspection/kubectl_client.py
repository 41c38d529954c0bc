"""
Kubectl Client - Runs ``kubectl explain`` and returns its schema documents.

Features:
- Recursive (whole field tree) and single-field queries
- Per-query timeout enforced on the subprocess
- Optional pinned kubectl context so a mid-run context switch has no effect
- Blank lines stripped from the output
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional

from explain_k8s.errors import QueryFailure, QueryTimeout
from explain_k8s.parser.document_splitter import remove_blank_lines

logger = logging.getLogger(__name__)


class SchemaSource(ABC):
    """Abstract source of schema documents."""

    @abstractmethod
    def query(self, full_name: str, recursive: bool = False) -> str:
        """
        Return the schema document for a resource or dotted field name.

        Args:
            full_name: Resource name or fully-qualified field name (``pod.spec``)
            recursive: Ask for the whole nested field structure in one document

        Returns:
            str: Raw schema document

        Raises:
            QueryFailure: If the document cannot be obtained
        """
        pass


class KubectlClient(SchemaSource):
    """
    Schema source backed by the ``kubectl explain`` command

    Usage:
    ```python
    client = KubectlClient(timeout=30, context="staging")
    document = client.query("deployment", recursive=True)
    ```
    """

    def __init__(
        self,
        kubectl_path: str = "kubectl",
        timeout: Optional[float] = 30.0,
        context: Optional[str] = None,
    ):
        """
        Initialize Kubectl Client

        Args:
            kubectl_path: kubectl binary name or path
            timeout: Seconds before a query is killed (None waits forever)
            context: kubectl context to pin every query to
        """
        self.kubectl_path = kubectl_path
        self.timeout = timeout
        self.context = context

    def build_command(self, full_name: str, recursive: bool = False) -> List[str]:
        """Build the kubectl argument list for one query."""
        command = [self.kubectl_path, "explain", full_name]
        if recursive:
            command.append("--recursive")
        if self.context:
            command.extend(["--context", self.context])
        return command

    def query(self, full_name: str, recursive: bool = False) -> str:
        command = self.build_command(full_name, recursive)
        logger.debug(f"Running: {' '.join(command)}")

        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise QueryTimeout(
                f"kubectl explain {full_name} exceeded {self.timeout}s",
                full_name=full_name,
            ) from e
        except OSError as e:
            raise QueryFailure(
                f"Failed to launch {self.kubectl_path}: {e}",
                full_name=full_name,
            ) from e

        if completed.returncode != 0:
            stderr = (completed.stderr or "").strip()
            raise QueryFailure(
                f"kubectl explain {full_name} failed with code {completed.returncode}"
                f"|Stdout: {(completed.stdout or '').strip()}|Stderr: {stderr}",
                full_name=full_name,
                stderr=stderr,
            )

        return remove_blank_lines(completed.stdout or "")
