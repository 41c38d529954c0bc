"""
Schema Document Parsing

Pure functions over ``kubectl explain`` text:
- split: document -> (description, field block)
- decompose: field block -> sibling fields with their nested blocks
- extract_field_description: single-field document -> description
"""

from .document_splitter import SplitDocument, extract_field_description, remove_blank_lines, split
from .field_decomposer import decompose, parse_field_line
from .resource_names import clean_resource_names, load_resource_names

__all__ = [
    "SplitDocument",
    "extract_field_description",
    "remove_blank_lines",
    "split",
    "decompose",
    "parse_field_line",
    "clean_resource_names",
    "load_resource_names",
]
