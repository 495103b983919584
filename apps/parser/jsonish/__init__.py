"""Lenient JSON extraction and schema coercion for LLM output."""
