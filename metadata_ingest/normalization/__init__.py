from metadata_ingest.normalization.models import AnalysisResult, FallbackUsed, Parsed
from metadata_ingest.normalization.normalizer import MetadataNormalizer

__all__ = ["AnalysisResult", "FallbackUsed", "MetadataNormalizer", "Parsed"]
