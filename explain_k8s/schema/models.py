"""Models for explained Kubernetes resource schemas."""
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional

# Kind given to every root node
RESOURCE_KIND = "Resource"

# Type labels kubectl uses for fields that carry nested fields
STRUCTURED_KINDS = ("Object", "[]Object")


def is_structured_kind(kind: str) -> bool:
    """Check if a kubectl type label denotes a type with nested fields."""
    return kind in STRUCTURED_KINDS or kind == RESOURCE_KIND


@dataclass(frozen=True)
class FieldEntry:
    """One field parsed out of a field block, before enrichment."""

    name: str
    kind: str
    full_name: str
    nested_block: str = ""

    def has_nested_fields(self) -> bool:
        """Check if the field carries its own nested field block."""
        return bool(self.nested_block)


@dataclass
class ExplanationNode:
    """A resource or field with its description and nested fields."""

    name: str
    full_name: str
    kind: str
    description: str = ""
    children: List["ExplanationNode"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def get_child(self, name: str) -> Optional["ExplanationNode"]:
        """Return direct child by name."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def find(self, full_name: str) -> Optional["ExplanationNode"]:
        """Return the node with the given fully-qualified name in this subtree."""
        if full_name == self.full_name:
            return self
        if not full_name.startswith(self.full_name + "."):
            return None
        for child in self.children:
            found = child.find(full_name)
            if found is not None:
                return found
        return None

    def walk(self):
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def count_fields(self) -> int:
        """Count descendant nodes (the node itself excluded)."""
        return sum(1 for _ in self.walk()) - 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "name": self.name,
            "fullyQualifiedName": self.full_name,
            "kind": self.kind,
            "description": self.description,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class FieldWarning:
    """A field whose description lookup failed."""

    full_name: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"fullyQualifiedName": self.full_name, "message": self.message}


@dataclass
class ExplainReport:
    """Outcome of one explanation run."""

    explanations: List[ExplanationNode] = field(default_factory=list)
    failed_resources: Dict[str, str] = field(default_factory=dict)
    field_warnings: List[FieldWarning] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_resources or self.field_warnings)

    def get_explanation(self, name: str) -> Optional[ExplanationNode]:
        """Return root node by resource name."""
        for explanation in self.explanations:
            if explanation.name == name:
                return explanation
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "elapsedSeconds": round(self.elapsed_seconds, 3),
            "explainedResources": [e.name for e in self.explanations],
            "failedResources": dict(sorted(self.failed_resources.items())),
            "fieldWarnings": [w.to_dict() for w in self.field_warnings],
        }
