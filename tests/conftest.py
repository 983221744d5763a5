"""Test configuration and fixtures for blogconv tests."""

import pytest
import tempfile
import shutil
import os
from pathlib import Path

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from blogconv_pkg.core import DocumentConverter
from blogconv_pkg.errors import RenderError
from blogconv_pkg.renderers import Renderer
from blogconv_pkg.settings import ConverterConfig

HEADER = """<!DOCTYPE html>
<html>
<head><title>{{TITLE}}</title></head>
<body>
"""

FOOTER = """</body>
</html>
"""


class StubRenderer(Renderer):
    """Deterministic renderer that records every call."""

    name = 'stub'

    def __init__(self, title='', body=None, available=True, fail=False, fail_standalone=False):
        self.title = title
        self.body = body
        self.available = available
        self.fail = fail
        self.fail_standalone = fail_standalone
        self.calls = []

    def is_available(self):
        return self.available

    def render_to_html(self, content, source_format, standalone=False):
        self.calls.append((content, source_format, standalone))
        if self.fail or (standalone and self.fail_standalone):
            raise RenderError("stub failure")
        if standalone:
            return f'<html><head><title>{self.title}</title></head><body></body></html>\n'
        if self.body is not None:
            return self.body
        return f'<div class="{source_format}">{content.strip()}</div>\n'

    def body_calls(self):
        return [call for call in self.calls if not call[2]]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def workspace(temp_dir):
    """A working directory holding the header and footer templates."""
    root = Path(temp_dir)
    (root / 'template_header.html').write_text(HEADER, encoding='utf-8')
    (root / 'template_footer.html').write_text(FOOTER, encoding='utf-8')
    return root


@pytest.fixture
def stub_renderer():
    return StubRenderer()


@pytest.fixture
def make_converter(workspace):
    """Factory building a DocumentConverter rooted at the workspace."""
    def _make(renderer=None, **options):
        options.setdefault('log_dir', None)
        config = ConverterConfig(base_dir=str(workspace), **options)
        return DocumentConverter(config, renderer=renderer or StubRenderer())
    return _make


@pytest.fixture
def write_source(workspace):
    """Write a source document into the workspace and return its path."""
    def _write(name, content):
        path = workspace / name
        path.write_text(content, encoding='utf-8')
        return str(path)
    return _write
