"""
Retriever - Memory Recall

Finds stored observations relevant to an upcoming prompt and renders them
as a context block.

Pipeline:
1. Sanitize the prompt into an FTS-safe query (skip short prompts)
2. Check worker health
3. Search the worker
4. Format results into <relevant-memories> within the token budget
"""

from .query_processor import QueryProcessor, RecallQuery, build_query
from .searcher import Searcher
from .formatter import format_recall_context, format_search_listing

__all__ = [
    "QueryProcessor",
    "RecallQuery",
    "build_query",
    "Searcher",
    "format_recall_context",
    "format_search_listing",
]
