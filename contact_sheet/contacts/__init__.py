from .projector import project
from .vcf import build_vcf, generate_vcf

__all__ = ["build_vcf", "generate_vcf", "project"]
