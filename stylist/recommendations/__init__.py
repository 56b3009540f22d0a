"""
Recommendation matching pipeline.

Responsibilities:
- Filter the catalog by availability and budget tier.
- Rank admissible items by semantic similarity to the shopper's preferences.
- Resolve the AI stylist's picks against the ranked candidates.
- Record each completed request in the history log.
"""
