from __future__ import annotations

import hashlib
import math
import re
from typing import Protocol

from sentence_transformers import SentenceTransformer

_TOKEN_PATTERN = re.compile(r"[a-z0-9\+#]+")


class EmbeddingProvider(Protocol):
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Return L2-normalized vector embeddings for input texts."""


class HashingEmbeddingProvider(EmbeddingProvider):
    """Deterministic bag-of-tokens embedding; needs no model download."""

    def __init__(self, dimension: int = 64) -> None:
        if dimension <= 0:
            raise ValueError("dimension must be greater than 0")
        self.dimension = dimension

    def embed(self, texts: list[str]) -> list[list[float]]:
        return [self._embed_single(text) for text in texts]

    def _embed_single(self, text: str) -> list[float]:
        vector = [0.0] * self.dimension
        tokens = _TOKEN_PATTERN.findall(text.lower())
        for token in tokens:
            digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
            index = int(digest[:8], 16) % self.dimension
            vector[index] += 1.0

        norm = math.sqrt(sum(value * value for value in vector))
        if norm <= 0:
            return vector
        return [value / norm for value in vector]


class SentenceTransformerEmbeddingProvider(EmbeddingProvider):
    _model_cache: dict[str, SentenceTransformer] = {}

    def __init__(self, model_name: str) -> None:
        self.model_name = model_name

    def _model(self) -> SentenceTransformer:
        if self.model_name not in self._model_cache:
            self._model_cache[self.model_name] = SentenceTransformer(self.model_name)
        return self._model_cache[self.model_name]

    def embed(self, texts: list[str]) -> list[list[float]]:
        vectors = self._model().encode(texts, normalize_embeddings=True, show_progress_bar=False)
        return [list(map(float, vector)) for vector in vectors]
