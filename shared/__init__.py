"""Shared infrastructure: LLM access, API helpers and exceptions."""
