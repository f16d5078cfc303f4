"""Field mappers: the null default and a semantic-similarity mapper."""

import asyncio
import re
import threading
from typing import Any, Dict, List, Optional

import numpy as np

from ...domain.models import FieldHints, FieldMappingSuggestion, TemplateField
from ..interfaces import IFieldMapper, ILoggingService

_SEPARATORS = re.compile(r"[\s_\-]+")

_shared_encoders: Dict[str, Any] = {}
_shared_encoders_lock = threading.Lock()


def load_shared_encoder(model_name: str):
    """
    Load a sentence transformer once per process and reuse it afterwards.

    Blocking; call it from a worker thread.
    """
    with _shared_encoders_lock:
        encoder = _shared_encoders.get(model_name)
        if encoder is None:
            from sentence_transformers import SentenceTransformer

            encoder = SentenceTransformer(model_name)
            _shared_encoders[model_name] = encoder
        return encoder


class NullFieldMapper(IFieldMapper):
    """Mapper used when no AI mapping is configured. Never suggests anything."""

    async def suggest(self, field: TemplateField, page_text: str) -> Optional[FieldMappingSuggestion]:
        return None


class SemanticFieldMapper(IFieldMapper):
    """
    Suggest label hints by semantic similarity between a field and page text.

    Splits the page-text snapshot into short candidate lines (visible labels
    tend to be short), embeds them with a sentence-transformers model and
    returns the lines closest to the field's label as label-text hints.
    Embeddings are cached per mapper instance, so one mapper should serve
    one run. The loaded model is shared by every mapper in the process.
    """

    def __init__(
        self,
        model_name: str = "all-MiniLM-L6-v2",
        min_score: float = 0.55,
        max_hints: int = 3,
        encoder=None,
        logging_service: ILoggingService = None,
    ):
        """
        Initialize the semantic mapper.

        Args:
            model_name: HuggingFace sentence transformer model name
            min_score: Minimum cosine similarity for a line to become a hint
            max_hints: Maximum number of label hints to return
            encoder: Object with ``encode(list_of_texts)``; loaded from
                     ``model_name`` on first use if None
            logging_service: Service for logging operations
        """
        self.model_name = model_name
        self.min_score = min_score
        self.max_hints = max_hints
        self.logger = logging_service
        self._encoder = encoder
        self._embeddings_cache: Dict[str, np.ndarray] = {}

    async def _get_encoder(self):
        """Fetch the process-wide sentence transformer on first use."""
        if self._encoder is None:
            if self.logger:
                self.logger.info(f"🧠 Loading semantic model: {self.model_name}")
            self._encoder = await asyncio.to_thread(load_shared_encoder, self.model_name)
        return self._encoder

    async def _embed(self, texts: List[str]) -> List[np.ndarray]:
        """Embed texts off the event loop, using the cache when possible."""
        missing = [text for text in texts if text not in self._embeddings_cache]
        if missing:
            encoder = await self._get_encoder()
            vectors = await asyncio.to_thread(encoder.encode, missing)
            for text, vector in zip(missing, vectors):
                self._embeddings_cache[text] = np.asarray(vector, dtype=float)
        return [self._embeddings_cache[text] for text in texts]

    @staticmethod
    def cosine_similarity(vec1: np.ndarray, vec2: np.ndarray) -> float:
        """Cosine similarity of two vectors, 0.0 when either is all zeros."""
        magnitude = np.linalg.norm(vec1) * np.linalg.norm(vec2)
        if magnitude == 0:
            return 0.0
        return float(np.dot(vec1, vec2) / magnitude)

    @staticmethod
    def candidate_lines(page_text: str, max_length: int = 80, limit: int = 200) -> List[str]:
        """Short, unique, non-empty lines from the page text."""
        lines = []
        for raw in page_text.splitlines():
            line = raw.strip().rstrip(":*").strip()
            if 2 <= len(line) <= max_length:
                lines.append(line)
        return list(dict.fromkeys(lines))[:limit]

    @staticmethod
    def query_for(field: TemplateField) -> str:
        """Natural-language query describing the field."""
        return field.label or _SEPARATORS.sub(" ", field.field_id).strip()

    async def suggest(self, field: TemplateField, page_text: str) -> Optional[FieldMappingSuggestion]:
        """Return the closest page lines as label hints, or None below ``min_score``."""
        candidates = self.candidate_lines(page_text or "")
        if not candidates:
            return None

        query = self.query_for(field)
        query_vector, *candidate_vectors = await self._embed([query] + candidates)

        scored = sorted(
            (
                (self.cosine_similarity(query_vector, vector), line)
                for line, vector in zip(candidates, candidate_vectors)
            ),
            key=lambda item: item[0],
            reverse=True,
        )
        hints = [line for score, line in scored[: self.max_hints] if score >= self.min_score]
        if not hints:
            if self.logger:
                self.logger.debug(f"🧠 No semantic match for '{query}' (best {scored[0][0]:.3f})")
            return None

        if self.logger:
            self.logger.info(f"🧠 Semantic hints for '{query}': {hints} (best {scored[0][0]:.3f})")
        return FieldMappingSuggestion(confidence=scored[0][0], hints=FieldHints(label_texts=tuple(hints)))
