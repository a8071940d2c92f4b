"""CSV statement import pipeline: parse, infer a mapping, commit."""

from finport.importing.committer import ImportCommitter
from finport.importing.csv_reader import ParsedFile, ParsedRow, parse_csv
from finport.importing.mapping import ColumnMapping, infer_mapping
from finport.importing.service import BatchDetails, ImportPreview, ImportService
from finport.importing.session import ImportSessionService

__all__ = [
    "BatchDetails",
    "ColumnMapping",
    "ImportCommitter",
    "ImportPreview",
    "ImportService",
    "ImportSessionService",
    "ParsedFile",
    "ParsedRow",
    "infer_mapping",
    "parse_csv",
]
