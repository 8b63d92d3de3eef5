from .serializers import export_csv, export_json, export_vcf, export_xlsx
from .sharer import DownloadSharer, NativeShareSharer, Sharer

__all__ = [
    "DownloadSharer",
    "NativeShareSharer",
    "Sharer",
    "export_csv",
    "export_json",
    "export_vcf",
    "export_xlsx",
]
