"""
Circuit Emotion Engine
======================

Core modules for word-level emotional profiling and text/session mood
aggregation.

This package provides:
- Tiered word resolution (cache, relational store, LLM inference)
- Confidence-weighted text emotion aggregation
- Recency-weighted session mood summaries with trend detection
- Lexicon seeding and analysis logging
"""

__version__ = "2.1.0"
