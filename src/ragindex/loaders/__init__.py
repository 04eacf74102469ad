# src/ragindex/loaders/__init__.py
"""File loaders for ragindex."""

from ragindex.loaders.base import Loader
from ragindex.loaders.directory import DirectoryLoader
from ragindex.loaders.html import HTMLLoader
from ragindex.loaders.registry import LoaderRegistry
from ragindex.loaders.text import TextLoader

__all__ = ["Loader", "TextLoader", "HTMLLoader", "LoaderRegistry", "DirectoryLoader"]
