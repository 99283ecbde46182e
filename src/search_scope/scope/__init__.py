"""Search scope construction and membership."""

from .patterns import (
    MATCH_ALL,
    InvalidPatternError,
    compile_name_patterns,
    glob_to_regex,
    is_case_sensitive_filesystem,
)
from .text_scope import (
    WORKSPACE_DESCRIPTION,
    SearchScope,
    convert_to_resources,
    describe_roots,
    is_derived_or_inside_derived,
    remove_redundant_entries,
)

__all__ = [
    "InvalidPatternError",
    "MATCH_ALL",
    "SearchScope",
    "WORKSPACE_DESCRIPTION",
    "compile_name_patterns",
    "convert_to_resources",
    "describe_roots",
    "glob_to_regex",
    "is_case_sensitive_filesystem",
    "is_derived_or_inside_derived",
    "remove_redundant_entries",
]
