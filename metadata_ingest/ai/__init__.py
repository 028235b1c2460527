from metadata_ingest.ai.analysis import AiAnalysis
from metadata_ingest.ai.factory import AiAnalysisFactory
from metadata_ingest.ai.prompt_builder import PromptBuilder

__all__ = ["AiAnalysis", "AiAnalysisFactory", "PromptBuilder"]
