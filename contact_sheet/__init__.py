"""Spreadsheet → contact analysis & export pipeline.

Public entry points used by collaborators (CLI, notebooks, other front ends).
"""

from .analysis.engine import analyze
from .contacts.projector import project
from .contacts.vcf import build_vcf, generate_vcf
from .export.serializers import export_csv, export_json, export_vcf, export_xlsx
from .spreadsheet.reader import parse, parse_file

__all__ = [
    "analyze",
    "build_vcf",
    "export_csv",
    "export_json",
    "export_vcf",
    "export_xlsx",
    "generate_vcf",
    "parse",
    "parse_file",
    "project",
]

__version__ = "0.1.0"
