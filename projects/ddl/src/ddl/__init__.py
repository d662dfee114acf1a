"""SQL DDL parsing and generation for ER diagrams."""

from ddl.generator import generate_sql
from ddl.inference import infer_relationships
from ddl.lexer import find_matching_paren, split_by_delimiter, strip_comments
from ddl.parser import parse_column, parse_ddl, parse_table_statement
from ddl.samples import Sample, get_sample, get_samples

__all__ = [
    "Sample",
    "find_matching_paren",
    "generate_sql",
    "get_sample",
    "get_samples",
    "infer_relationships",
    "parse_column",
    "parse_ddl",
    "parse_table_statement",
    "split_by_delimiter",
    "strip_comments",
]
