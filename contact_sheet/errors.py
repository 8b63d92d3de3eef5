from __future__ import annotations

"""Error taxonomy for the spreadsheet → contact pipeline.

Parse / export errors are raised by the core and caught at the collaborator
boundary (services.pipeline, cli). Analysis and projection never raise.
"""

__all__ = [
    "ContactSheetError",
    "ParseError",
    "UnsupportedFormat",
    "EmptySource",
    "SheetHeaderError",
    "ReadFailure",
    "MappingError",
    "ExportError",
    "NoNameMapped",
    "NoContactsFound",
    "SerializationFailure",
    "error_type_of",
]


class ContactSheetError(Exception):
    """Base class for all pipeline errors."""


class ParseError(ContactSheetError):
    """Raised when a source file cannot be turned into a TabularDataset."""


class UnsupportedFormat(ParseError):
    """File extension is not one of csv / xlsx / xls / ods."""


class EmptySource(ParseError):
    """Source has no data rows (after the header row) or no sheets."""


class SheetHeaderError(EmptySource):
    """First row yields zero non-empty header names."""


class ReadFailure(ParseError):
    """Underlying byte read / decode failed."""


class MappingError(ContactSheetError):
    """Column mapping references a header that does not exist."""


class ExportError(ContactSheetError):
    pass


class NoNameMapped(ExportError):
    """VCF export requested without a `name` mapping."""


class NoContactsFound(ExportError):
    """VCF export requested but no row survived contact projection."""


class SerializationFailure(ExportError):
    """Format-specific write error (catch-all)."""


def error_type_of(exc: BaseException) -> str:
    """Return UPPER_SNAKE error type for an exception (UnsupportedFormat -> UNSUPPORTED_FORMAT)."""
    name = type(exc).__name__
    out: list[str] = []
    for i, ch in enumerate(name):
        if ch.isupper() and i > 0 and not name[i - 1].isupper():
            out.append("_")
        out.append(ch.upper())
    return "".join(out)
