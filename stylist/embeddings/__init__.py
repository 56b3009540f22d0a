"""
Embeddings layer for semantic ranking.

Responsibilities:
- Project catalog items into a single text string for embedding.
- Load a lightweight sentence-transformer model as the embedding provider.
- Memoise vectors for unchanged catalog text across requests.
- Provide cosine similarity scores with soft-failure semantics.
"""
