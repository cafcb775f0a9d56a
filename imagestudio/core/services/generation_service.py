import asyncio
import random
from dataclasses import dataclass, asdict
from typing import Optional, List, Dict, Any

from imagestudio.core.config import Settings, get_settings
from imagestudio.ai_engine.utils.logging_config import get_logger, log_performance
from imagestudio.ai_engine.image_processing.utils.image_utils import (
    clamp_parameter, InvalidArgumentError
)

logger = get_logger(__name__)

# Placeholder artwork served in place of a real text-to-image model
PLACEHOLDER_IMAGES = [
    'https://images.unsplash.com/photo-1541961017774-22349e4a1262?w=512&h=512&fit=crop',
    'https://images.unsplash.com/photo-1518717758536-85ae29035b6d?w=512&h=512&fit=crop',
    'https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=512&h=512&fit=crop',
    'https://images.unsplash.com/photo-1517849845537-4d257902454a?w=512&h=512&fit=crop',
    'https://images.unsplash.com/photo-1546975490-e8b92a360b24?w=512&h=512&fit=crop',
    'https://images.unsplash.com/photo-1552053831-71594a27632d?w=512&h=512&fit=crop',
    'https://images.unsplash.com/photo-1541781774459-bb2af2f05b55?w=512&h=512&fit=crop',
    'https://images.unsplash.com/photo-1583337130417-3346a1be7dee?w=512&h=512&fit=crop',
]

MODEL_TYPE = 'text-to-design-sdxl'
MAX_SEED = 1_000_000

def prompt_hash(text: str) -> int:
    """Signed 32-bit ``h = 31*h + c`` string hash over UTF-16 code units"""
    data = text.encode('utf-16-le')
    h = 0
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + code) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h

def generate_image_url(prompt: str, seed: int) -> str:
    """Pick a placeholder deterministically from the prompt and seed"""
    index = abs(prompt_hash(prompt + str(int(seed)))) % len(PLACEHOLDER_IMAGES)
    return PLACEHOLDER_IMAGES[index]

def mock_attention_score(prompt: str, creativity: float,
                         rng: Optional[random.Random] = None) -> float:
    """Fake attention score in [1, 10] from prompt length, creativity and jitter"""
    rng = rng or random
    word_count = len(prompt.split(' '))
    complexity = min(word_count / 10, 1)
    creativity_bonus = creativity * 0.3
    random_factor = rng.random() * 0.2

    return min(max(complexity + creativity_bonus + random_factor, 0.1), 1) * 10

@dataclass
class GenerationResult:
    """One generated design"""
    image_url: str
    attention_score: float
    seed: int
    prompt: str
    creativity: float
    model_type: str = MODEL_TYPE

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

class GenerationService:
    """Mocked text-to-design generator"""

    def __init__(self, settings: Optional[Settings] = None, rng: Optional[random.Random] = None):
        self.settings = settings or get_settings()
        self.rng = rng or random.Random()
        self.total_generated = 0
        logger.info("GenerationService initialized with %d placeholder images", len(PLACEHOLDER_IMAGES))

    def build_results(self, prompt: str, seed: Optional[int] = None, creativity: float = 0.5,
                      batch: bool = False, batch_count: int = 1) -> List[GenerationResult]:
        """Synchronous core of ``generate``"""
        if prompt is None or not prompt.strip():
            raise InvalidArgumentError("Prompt is required")

        creativity = clamp_parameter(creativity, (0.0, 1.0), 'creativity')
        if seed is None:
            seed = self.rng.randrange(MAX_SEED)

        count = min(max(int(batch_count), 1), self.settings.max_generation_batch) if batch else 1

        results = []
        for i in range(count):
            current_seed = int(seed) + i
            results.append(GenerationResult(
                image_url=generate_image_url(prompt, current_seed),
                attention_score=mock_attention_score(prompt, creativity, self.rng),
                seed=current_seed,
                prompt=prompt.strip(),
                creativity=creativity,
            ))

        self.total_generated += len(results)
        logger.info("Generated %d design(s) for seed %s", len(results), seed)
        return results

    @log_performance(logger, "design generation")
    async def generate(self, prompt: str, seed: Optional[int] = None, creativity: float = 0.5,
                       batch: bool = False, batch_count: int = 1) -> List[GenerationResult]:
        """Generate one design, or up to ``max_generation_batch`` with consecutive seeds"""
        results = self.build_results(prompt, seed, creativity, batch, batch_count)

        if self.settings.generation_delay_seconds > 0:
            await asyncio.sleep(self.settings.generation_delay_seconds)

        return results

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "total_generated": self.total_generated,
            "placeholder_count": len(PLACEHOLDER_IMAGES),
            "model_type": MODEL_TYPE,
        }
