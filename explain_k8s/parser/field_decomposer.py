"""
Field Block Decomposer - Partitions a field block into sibling fields.

Each top-level line of a block is ``name<TAB><type>``. Lines indented by one
more padding level belong to the field above them and form its nested block,
which is decomposed again at the next depth.
"""

from typing import List, Tuple

from explain_k8s.errors import DuplicateFieldName, MalformedFieldLine, UnexpectedLeadingIndent
from explain_k8s.parser.document_splitter import FIELDS_PADDING
from explain_k8s.schema.models import FieldEntry

COLUMN_SEPARATOR = "\t"


def parse_field_line(line: str, parent_full_name: str) -> Tuple[str, str]:
    """
    Split a top-level field line into name and kind.

    Returns:
        (name, kind) with the angle brackets stripped from the type column

    Raises:
        MalformedFieldLine: If the line is not exactly two tab-separated columns
    """
    columns = line.split(COLUMN_SEPARATOR)
    if len(columns) != 2 or not columns[0].strip():
        raise MalformedFieldLine(
            f"expected 2 tab-separated columns per line, found {len(columns)}",
            full_name=parent_full_name,
            snippet=line,
        )
    name = columns[0].strip()
    kind = columns[1].strip().strip("<>")
    return name, kind


def decompose(field_block: str, parent_full_name: str) -> List[FieldEntry]:
    """
    Partition a field block into its top-level fields.

    Args:
        field_block: Field lines with the enclosing padding already stripped
        parent_full_name: Fully-qualified name of the field owning the block

    Returns:
        List[FieldEntry]: Fields in document order, each with its nested block
        (one padding level stripped) or an empty string

    Raises:
        UnexpectedLeadingIndent: If the first line is indented
        MalformedFieldLine: If a top-level line is not ``name<TAB>type``
        DuplicateFieldName: If two siblings share a name
    """
    lines = [line for line in field_block.split("\n") if line.strip()]
    if not lines:
        return []

    if lines[0].startswith(FIELDS_PADDING):
        raise UnexpectedLeadingIndent(
            "first line starts with padding when it should not",
            full_name=parent_full_name,
            snippet=lines[0],
        )

    parsed: List[Tuple[str, str, List[str]]] = []
    seen = set()
    for line in lines:
        if line.startswith(FIELDS_PADDING):
            parsed[-1][2].append(line[len(FIELDS_PADDING):])
            continue

        name, kind = parse_field_line(line, parent_full_name)
        if name in seen:
            raise DuplicateFieldName(
                f"field '{name}' appears more than once",
                full_name=parent_full_name,
                snippet=line,
            )
        seen.add(name)
        parsed.append((name, kind, []))

    return [
        FieldEntry(
            name=name,
            kind=kind,
            full_name=f"{parent_full_name}.{name}",
            nested_block="\n".join(nested_lines),
        )
        for name, kind, nested_lines in parsed
    ]
