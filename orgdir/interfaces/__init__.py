"""
Interfaces layer: boundary schemas for the persistence collaborator.
"""

from .records import (
    DirectoryExport,
    UserRecord,
    dump_population,
    parse_population,
    parse_record,
    read_directory_file,
)

__all__ = [
    "UserRecord",
    "DirectoryExport",
    "parse_record",
    "parse_population",
    "dump_population",
    "read_directory_file",
]
