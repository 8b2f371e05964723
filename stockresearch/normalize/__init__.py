"""Schema normalizer: provider payloads to canonical records."""

from stockresearch.normalize.normalizer import (
    RecordKind,
    SchemaHints,
    extract_rows,
    first_row,
    normalize,
    normalize_all,
    parse_date,
    resolve_concept,
    resolve_field,
    resolve_fields,
    to_number,
    year_of,
)

__all__ = [
    "RecordKind",
    "SchemaHints",
    "extract_rows",
    "first_row",
    "normalize",
    "normalize_all",
    "parse_date",
    "resolve_concept",
    "resolve_field",
    "resolve_fields",
    "to_number",
    "year_of",
]
