"""Corpus loading and block segmentation."""

from .segment import Block, segment_text
from .walk import SnippetFile, WalkOptions, iter_snippet_files

__all__ = ["Block", "SnippetFile", "WalkOptions", "iter_snippet_files", "segment_text"]
