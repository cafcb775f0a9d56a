from .enhancement_service import EnhancementService, EnhancementResult
from .generation_service import GenerationService, GenerationResult, generate_image_url, mock_attention_score

__all__ = [
    'EnhancementService',
    'EnhancementResult',
    'GenerationService',
    'GenerationResult',
    'generate_image_url',
    'mock_attention_score',
]
