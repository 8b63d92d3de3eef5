from .reader import SUPPORTED_EXTENSIONS, detect_extension, parse, parse_file

__all__ = ["SUPPORTED_EXTENSIONS", "detect_extension", "parse", "parse_file"]
