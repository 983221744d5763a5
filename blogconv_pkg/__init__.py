"""
blogconv - turn a single source document into a themed HTML page.

blogconv takes one plain text, Markdown or Org file, renders it to HTML with
pandoc (or mistune for Markdown) and wraps the result in a header and footer
template, substituting the document title into the header.
"""

__version__ = "1.0.0"
__author__ = "Robert DeVore"
__email__ = "me@robertdevore.com"

from .core import DocumentConverter, SourceDocument
from .settings import ConverterConfig, ConverterSettings

__all__ = ['DocumentConverter', 'SourceDocument', 'ConverterConfig', 'ConverterSettings']
