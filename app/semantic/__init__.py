from .embeddings import EmbeddingProvider, HashingEmbeddingProvider, SentenceTransformerEmbeddingProvider

__all__ = ["EmbeddingProvider", "HashingEmbeddingProvider", "SentenceTransformerEmbeddingProvider"]
