"""
Document Splitter - Separates a ``kubectl explain`` document into its sections.

A recursive resource document looks like:

    DESCRIPTION:
         Pod is a collection of containers that can run on a host.
    FIELDS:
       apiVersion\t<string>
       status\t<Object>
          phase\t<string>

Description lines carry a 5-space padding, field lines a 3-space padding per
nesting level. Blank lines carry no meaning and are dropped before parsing.
"""

from typing import List, NamedTuple, Optional

from explain_k8s.errors import MissingDescriptionSection, MissingFieldsSection, TrailingUnparsedContent

DESCRIPTION_LABEL = "DESCRIPTION:"
DESCRIPTION_PADDING = " " * 5

FIELDS_LABEL = "FIELDS:"
FIELDS_PADDING = " " * 3

# Lines preceding DESCRIPTION: in a single-field document (FIELD/RESOURCE line and the label)
DEFAULT_SKIP_LINES = 2


class SplitDocument(NamedTuple):
    """Description text and field block of one schema document."""

    description: str
    field_block: str


def remove_blank_lines(text: str) -> str:
    """Drop empty and whitespace-only lines."""
    return "\n".join(line for line in text.splitlines() if line.strip())


class LineScanner:
    """Forward-only cursor over the non-blank lines of a document."""

    def __init__(self, text: str):
        self.lines: List[str] = [line for line in text.splitlines() if line.strip()]
        self.position = 0

    @property
    def exhausted(self) -> bool:
        return self.position >= len(self.lines)

    def peek(self) -> Optional[str]:
        """Return the current line without consuming it."""
        if self.exhausted:
            return None
        return self.lines[self.position]

    def skip(self, count: int) -> None:
        """Consume up to ``count`` lines unconditionally."""
        self.position = min(self.position + count, len(self.lines))

    def take_label(self, label: str) -> bool:
        """Consume the current line if it is exactly ``label``."""
        line = self.peek()
        if line is None or line.rstrip() != label:
            return False
        self.position += 1
        return True

    def take_padded(self, padding: str) -> List[str]:
        """Consume consecutive lines starting with ``padding``, returned with it stripped."""
        taken = []
        while not self.exhausted and self.lines[self.position].startswith(padding):
            taken.append(self.lines[self.position][len(padding):])
            self.position += 1
        return taken

    def remainder(self) -> str:
        return "\n".join(self.lines[self.position:])


def split(raw_text: str, full_name: str = "") -> SplitDocument:
    """
    Split a recursive schema document into description and field block.

    Args:
        raw_text: Output of ``kubectl explain <resource> --recursive``
        full_name: Name the document was queried for, used in error messages

    Returns:
        SplitDocument: Description joined with single spaces, and the field
        block with the one-level padding stripped from every line

    Raises:
        MissingDescriptionSection: No DESCRIPTION label or no description line
        MissingFieldsSection: No FIELDS label or no field line after the description
        TrailingUnparsedContent: Unpadded text remains after the field lines
    """
    scanner = LineScanner(raw_text)

    if not scanner.take_label(DESCRIPTION_LABEL):
        raise MissingDescriptionSection(
            "description section was not in expected location",
            full_name=full_name,
            snippet=scanner.peek(),
        )
    description_lines = scanner.take_padded(DESCRIPTION_PADDING)
    if not description_lines:
        raise MissingDescriptionSection(
            "description section needs at least one line, but found none",
            full_name=full_name,
            snippet=scanner.peek(),
        )

    if not scanner.take_label(FIELDS_LABEL):
        raise MissingFieldsSection(
            "fields section was not in expected location",
            full_name=full_name,
            snippet=scanner.peek(),
        )
    field_lines = scanner.take_padded(FIELDS_PADDING)
    if not field_lines:
        raise MissingFieldsSection(
            "fields section needs at least one line, but found none",
            full_name=full_name,
            snippet=scanner.peek(),
        )

    if not scanner.exhausted:
        raise TrailingUnparsedContent(
            "document not exhausted after the fields section",
            full_name=full_name,
            snippet=scanner.remainder(),
        )

    return SplitDocument(" ".join(description_lines), "\n".join(field_lines))


def extract_field_description(raw_text: str, skip_lines: int = DEFAULT_SKIP_LINES) -> str:
    """
    Extract the description of a single-field document.

    The first ``skip_lines`` non-blank lines are dropped, then padded lines are
    collected until the first unpadded one. A document without description
    lines yields an empty string.
    """
    scanner = LineScanner(raw_text)
    scanner.skip(skip_lines)
    return " ".join(scanner.take_padded(DESCRIPTION_PADDING))
