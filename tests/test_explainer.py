"""Tests for KubectlExplainer (the tree aggregator)."""

import random
from unittest.mock import patch

import pytest

from explain_k8s.config import ExplainerConfig
from explain_k8s.errors import ConfigurationError, QueryFailure, QueryTimeout
from explain_k8s.introspection.enrichment import FailurePolicy
from explain_k8s.introspection.explainer import KubectlExplainer
from explain_k8s.schema.models import RESOURCE_KIND

from conftest import FakeSchemaSource, POD_DOCUMENT


SERVICE_DOCUMENT = """DESCRIPTION:
     Service is a named abstraction of software service.
FIELDS:
   spec\t<Object>
      ports\t<[]Object>
         port\t<integer>
         name\t<string>
      selector\t<map[string]string>
   kind\t<string>
   apiVersion\t<string>
"""

WIDE_DOCUMENT = "DESCRIPTION:\n     Ten fields.\nFIELDS:\n" + "".join(
    f"   field{i}\t<string>\n" for i in range(10)
)


def multi_resource_source(**kwargs):
    return FakeSchemaSource(
        recursive_documents={"pod": POD_DOCUMENT, "service": SERVICE_DOCUMENT, "wide": WIDE_DOCUMENT},
        **kwargs,
    )


# ============================================================================
# TEST: scenarios
# ============================================================================


class TestExplainScenarios:
    """End-to-end scenarios over a fake kubectl"""

    def test_pod_scenario(self, pod_source):
        """Test the pod document produces the expected tree"""
        explanations = KubectlExplainer(pod_source, max_workers=2).explain(["pod"])

        assert [e.to_dict() for e in explanations] == [{
            "name": "pod",
            "fullyQualifiedName": "pod",
            "kind": RESOURCE_KIND,
            "description": "A pod.",
            "children": [{
                "name": "status",
                "fullyQualifiedName": "pod.status",
                "kind": "Object",
                "description": "Most recently observed status.",
                "children": [{
                    "name": "phase",
                    "fullyQualifiedName": "pod.status.phase",
                    "kind": "string",
                    "description": "Current condition of the pod.",
                    "children": [],
                }],
            }],
        }]

    def test_resource_queried_recursively_once(self, pod_source):
        """Test one recursive query per resource, single queries per field"""
        KubectlExplainer(pod_source).run(["pod"])

        assert [c for c in pod_source.calls if c[1]] == [("pod", True)]
        assert sorted(pod_source.field_queries()) == ["pod.status", "pod.status.phase"]

    def test_ten_fields_one_timeout(self):
        """Test one timed-out field query does not abort the run"""
        source = multi_resource_source(failures={
            "wide.field3": QueryTimeout("kubectl explain wide.field3 exceeded 30s", full_name="wide.field3"),
        })

        report = KubectlExplainer(source, max_workers=4).run(["wide"])
        wide = report.get_explanation("wide")

        assert len(wide.children) == 10
        assert wide.get_child("field3").description == ""
        assert all(c.description for c in wide.children if c.name != "field3")
        assert [w.full_name for w in report.field_warnings] == ["wide.field3"]
        assert report.failed_resources == {}

    def test_leading_indent_fails_resource_without_partial_tree(self):
        """Test an indented first field line omits the resource"""
        source = FakeSchemaSource(recursive_documents={
            "bad": "DESCRIPTION:\n     d\nFIELDS:\n      phase\t<string>\n   kind\t<string>\n",
        })

        report = KubectlExplainer(source).run(["bad"])

        assert report.explanations == []
        assert "first line starts with padding" in report.failed_resources["bad"]
        assert source.field_queries() == []

    def test_duplicate_field_fails_resource(self):
        """Test duplicate siblings omit the resource"""
        source = FakeSchemaSource(recursive_documents={
            "dup": "DESCRIPTION:\n     d\nFIELDS:\n   kind\t<string>\n   kind\t<string>\n",
            "pod": POD_DOCUMENT,
        })

        report = KubectlExplainer(source).run(["dup", "pod"])

        assert [e.name for e in report.explanations] == ["pod"]
        assert "dup" in report.failed_resources
        assert "kind" in report.failed_resources["dup"]


# ============================================================================
# TEST: aggregation
# ============================================================================


class TestKubectlExplainer:
    """Tests for KubectlExplainer.run() and explain()"""

    def test_forest_sorted_by_name(self):
        """Test roots are sorted whatever the input order"""
        explanations = KubectlExplainer(multi_resource_source()).explain(["wide", "service", "pod"])

        assert [e.name for e in explanations] == ["pod", "service", "wide"]
        assert all(e.kind == RESOURCE_KIND for e in explanations)

    def test_names_cleaned(self):
        """Test blank and duplicate names are dropped before querying"""
        source = multi_resource_source()

        explanations = KubectlExplainer(source).explain(["pod", "", "  ", "pod", " service "])

        assert [e.name for e in explanations] == ["pod", "service"]
        assert sorted(c for c in source.calls if c[1]) == [("pod", True), ("service", True)]

    def test_empty_names_rejected(self):
        """Test an empty resource list is a configuration error"""
        with pytest.raises(ConfigurationError):
            KubectlExplainer(FakeSchemaSource()).run(["", " "])

    def test_invalid_worker_count_rejected(self):
        """Test max_workers below one"""
        with pytest.raises(ConfigurationError):
            KubectlExplainer(FakeSchemaSource(), max_workers=0)

    def test_fully_qualified_names_consistent(self):
        """Test every child's full name extends its parent's"""
        explanations = KubectlExplainer(multi_resource_source()).explain(["pod", "service", "wide"])

        for root in explanations:
            assert root.full_name == root.name
            for node in root.walk():
                for child in node.children:
                    assert child.full_name == f"{node.full_name}.{child.name}"

    def test_every_level_sorted(self):
        """Test siblings ascend strictly by name at every depth"""
        explanations = KubectlExplainer(multi_resource_source()).explain(["service"])

        for node in explanations[0].walk():
            names = [c.name for c in node.children]
            assert names == sorted(set(names))

    def test_failed_recursive_query_omits_resource(self):
        """Test a resource kubectl does not know"""
        report = KubectlExplainer(multi_resource_source()).run(["pod", "nosuchthing"])

        assert [e.name for e in report.explanations] == ["pod"]
        assert list(report.failed_resources) == ["nosuchthing"]
        assert report.has_failures is True

    def test_structural_failure_isolated(self):
        """Test a malformed resource does not affect the others"""
        source = multi_resource_source()
        source.recursive_documents["broken"] = "KIND: Broken\n"

        report = KubectlExplainer(source).run(["broken", "pod", "service"])

        assert [e.name for e in report.explanations] == ["pod", "service"]
        assert "description section" in report.failed_resources["broken"]

    def test_strict_policy_fails_resource(self):
        """Test strict policy turns a field failure into a resource failure"""
        source = multi_resource_source(failures={"service.spec.ports.port": QueryFailure("boom")})

        report = KubectlExplainer(source, policy=FailurePolicy.STRICT).run(["pod", "service"])

        assert [e.name for e in report.explanations] == ["pod"]
        assert "boom" in report.failed_resources["service"]
        assert report.field_warnings == []

    def test_tolerant_policy_keeps_resource(self):
        """Test tolerant policy keeps the resource with a warning"""
        source = multi_resource_source(failures={"service.spec.ports.port": QueryFailure("boom")})

        report = KubectlExplainer(source).run(["pod", "service"])

        assert [e.name for e in report.explanations] == ["pod", "service"]
        assert [w.full_name for w in report.field_warnings] == ["service.spec.ports.port"]

    @pytest.mark.parametrize("seed", [3, 11, 99])
    def test_output_deterministic_under_latency(self, seed):
        """Test shuffled latencies give identical output"""
        baseline = [e.to_dict() for e in KubectlExplainer(multi_resource_source()).explain(["pod", "service", "wide"])]

        rng = random.Random(seed)
        names = ["pod", "service", "wide", "pod.status", "pod.status.phase", "service.spec",
                 "service.spec.ports", "service.spec.ports.port", "service.kind"]
        names += [f"wide.field{i}" for i in range(10)]
        delays = {name: rng.uniform(0, 0.02) for name in names}

        explainer = KubectlExplainer(multi_resource_source(delays=delays), max_workers=5)
        shuffled = [e.to_dict() for e in explainer.explain(["wide", "pod", "service"])]

        assert shuffled == baseline

    def test_sequential_mode(self):
        """Test a single worker explains several nested resources"""
        source = multi_resource_source()

        report = KubectlExplainer(source, max_workers=1).run(["pod", "service", "wide"])

        assert len(report.explanations) == 3
        assert source.max_in_flight == 1

    def test_query_concurrency_bounded(self):
        """Test the worker count caps simultaneous kubectl queries"""
        delays = {f"wide.field{i}": 0.02 for i in range(10)}
        source = multi_resource_source(delays=delays)

        KubectlExplainer(source, max_workers=3).run(["pod", "service", "wide"])

        assert source.max_in_flight <= 3

    def test_report_elapsed_time(self, pod_source):
        """Test elapsed time is recorded"""
        report = KubectlExplainer(pod_source).run(["pod"])

        assert report.elapsed_seconds >= 0
        assert report.to_dict()["explainedResources"] == ["pod"]


class TestFromConfig:
    """Tests for KubectlExplainer.from_config()"""

    def test_builds_kubectl_client(self):
        """Test config values reach the kubectl client"""
        config = ExplainerConfig(
            kubectl_path="/usr/local/bin/kubectl",
            context="staging",
            query_timeout=5.0,
            max_workers=3,
            failure_policy=FailurePolicy.STRICT,
            description_skip_lines=4,
        )

        with patch("explain_k8s.introspection.explainer.KubectlClient") as client_cls:
            explainer = KubectlExplainer.from_config(config)

        client_cls.assert_called_once_with(kubectl_path="/usr/local/bin/kubectl", timeout=5.0, context="staging")
        assert explainer.source is client_cls.return_value
        assert explainer.max_workers == 3
        assert explainer.policy is FailurePolicy.STRICT
        assert explainer.skip_lines == 4

    def test_given_source_used(self, pod_source):
        """Test an explicit source replaces kubectl"""
        explainer = KubectlExplainer.from_config(ExplainerConfig(), source=pod_source)

        assert explainer.source is pod_source

    def test_unexpected_field_error_contained(self):
        """Test a non-kubectl error on a field only empties that field"""
        source = multi_resource_source(failures={"service.spec": TimeoutError("slow")})

        report = KubectlExplainer(source, max_workers=3).run(["pod", "service"])

        assert [e.name for e in report.explanations] == ["pod", "service"]
        spec = report.get_explanation("service").get_child("spec")
        assert spec.description == ""
        assert [c.name for c in spec.children] == ["ports", "selector"]
        assert [w.full_name for w in report.field_warnings] == ["service.spec"]
        assert "TimeoutError" in report.field_warnings[0].message
        assert report.failed_resources == {}

    def test_unexpected_resource_error_contained(self):
        """Test a non-kubectl error on the recursive query omits only that resource"""
        source = multi_resource_source(failures={"service": RuntimeError("connection reset")})

        report = KubectlExplainer(source).run(["pod", "service"])

        assert [e.name for e in report.explanations] == ["pod"]
        assert "connection reset" in report.failed_resources["service"]

    def test_unexpected_field_error_strict(self):
        """Test strict policy fails the resource on a non-kubectl error"""
        source = multi_resource_source(failures={"service.kind": ValueError("bad bytes")})

        report = KubectlExplainer(source, policy=FailurePolicy.STRICT).run(["pod", "service"])

        assert [e.name for e in report.explanations] == ["pod"]
        assert "bad bytes" in report.failed_resources["service"]
