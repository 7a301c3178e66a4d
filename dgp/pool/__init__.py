"""Sentence pool buffering."""
from dgp.pool.sentence_pool import SentencePool, SentenceSource, FALLBACK_SENTENCES
