"""Shared fixtures: a fake schema source standing in for kubectl."""

import threading
import time
from typing import Dict, List, Optional, Tuple

import pytest

from explain_k8s.errors import QueryFailure
from explain_k8s.introspection.kubectl_client import SchemaSource


POD_DOCUMENT = "DESCRIPTION:\n     A pod.\nFIELDS:\n   status\t<Object>\n      phase\t<string>\n"


def field_document(full_name: str, kind: str = "string", description: str = "") -> str:
    """Single-field document shaped like ``kubectl explain pod.status``."""
    name = full_name.rsplit(".", 1)[-1]
    description = description or f"Description of {full_name}."
    return f"FIELD:    {name} <{kind}>\n\nDESCRIPTION:\n     {description}\n"


class FakeSchemaSource(SchemaSource):
    """
    Canned kubectl answers.

    Single-field queries without a canned document get an auto-generated
    "Description of <full name>." answer. Delays and failures are keyed by
    fully-qualified name.
    """

    def __init__(
        self,
        recursive_documents: Optional[Dict[str, str]] = None,
        field_documents: Optional[Dict[str, str]] = None,
        delays: Optional[Dict[str, float]] = None,
        failures: Optional[Dict[str, Exception]] = None,
    ):
        self.recursive_documents = recursive_documents or {}
        self.field_documents = field_documents or {}
        self.delays = delays or {}
        self.failures = failures or {}
        self.calls: List[Tuple[str, bool]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def query(self, full_name: str, recursive: bool = False) -> str:
        with self._lock:
            self.calls.append((full_name, recursive))
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(full_name, 0)
            if delay:
                time.sleep(delay)
            if full_name in self.failures:
                raise self.failures[full_name]
            if recursive:
                if full_name not in self.recursive_documents:
                    raise QueryFailure(f"no document for {full_name}", full_name=full_name)
                return self.recursive_documents[full_name]
            return self.field_documents.get(full_name) or field_document(full_name)
        finally:
            with self._lock:
                self.in_flight -= 1

    def field_queries(self) -> List[str]:
        return [name for name, recursive in self.calls if not recursive]


@pytest.fixture
def pod_source():
    """Fake source answering the pod scenario"""
    return FakeSchemaSource(
        recursive_documents={"pod": POD_DOCUMENT},
        field_documents={
            "pod.status": field_document("pod.status", "Object", "Most recently observed status."),
            "pod.status.phase": field_document("pod.status.phase", "string", "Current condition of the pod."),
        },
    )
