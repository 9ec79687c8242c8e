"""Workflow orchestrators composing discovery, extraction and CSV output."""

from .convert_flow import convert_statements, openai_extractor, tidy_csv

__all__ = ["convert_statements", "openai_extractor", "tidy_csv"]
