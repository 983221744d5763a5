"""
Markup renderers used by the document converter.

A renderer turns source text in a named markup format into HTML5. The
converter only relies on ``render_to_html`` and ``is_available``; which engine
sits behind them is a configuration choice.
"""

import re
import html
import shutil
import subprocess
import yaml
import mistune
from typing import Dict, Optional, Tuple
from .errors import MissingDependencyError, RenderError


TITLE_RE = re.compile(r'<title>([^<]+)', re.IGNORECASE)
FRONT_MATTER_RE = re.compile(r'\A---[ \t]*\r?\n(.*?)^---[ \t]*\r?$\n?', re.DOTALL | re.MULTILINE)


def extract_html_title(html_text: str) -> str:
    """Return the text of the first ``<title>`` element, or '' when absent."""
    if not html_text:
        return ''
    match = TITLE_RE.search(html_text)
    if not match:
        return ''
    return match.group(1).strip()


class Renderer:
    """Base class for markup-to-HTML engines."""

    name = 'renderer'

    def is_available(self) -> bool:
        return True

    def render_to_html(self, content: str, source_format: str, standalone: bool = False) -> str:
        raise NotImplementedError


class PandocRenderer(Renderer):
    """Render through an external ``pandoc`` process."""

    name = 'pandoc'

    def __init__(self, executable: str = 'pandoc', timeout: Optional[float] = 60):
        self.executable = executable
        self.timeout = timeout

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    def build_command(self, source_format: str, standalone: bool = False):
        command = [self.executable, '--from', source_format, '--to', 'html5']
        if standalone:
            command.append('--standalone')
        return command

    def render_to_html(self, content: str, source_format: str, standalone: bool = False) -> str:
        command = self.build_command(source_format, standalone)
        try:
            result = subprocess.run(
                command,
                input=content,
                capture_output=True,
                text=True,
                encoding='utf-8',
                timeout=self.timeout,
                check=False
            )
        except subprocess.TimeoutExpired:
            raise RenderError(f"pandoc timed out after {self.timeout} seconds")
        except (IOError, OSError) as e:
            raise RenderError(f"Could not run {self.executable}: {e}")

        if result.returncode != 0:
            detail = (result.stderr or '').strip().splitlines()
            reason = detail[-1] if detail else 'no error output'
            raise RenderError(f"pandoc exited with status {result.returncode}: {reason}")
        return result.stdout


class MistuneRenderer(Renderer):
    """In-process Markdown renderer built on mistune."""

    name = 'mistune'
    SUPPORTED_FORMATS = ('markdown', 'commonmark', 'gfm')

    def __init__(self):
        self.markdown_parser = self.create_markdown_parser()

    def create_markdown_parser(self):
        """Create a Mistune markdown parser with a custom renderer."""
        class CustomRenderer(mistune.HTMLRenderer):
            def __init__(self):
                super().__init__(escape=False)
            def block_code(self, code, info=None):
                escaped_code = mistune.escape(code)
                return '<pre style="white-space: pre-wrap;"><code>{}</code></pre>'.format(escaped_code)
        return mistune.create_markdown(
            renderer=CustomRenderer(),
            plugins=['table', 'task_lists', 'strikethrough']
        )

    def split_front_matter(self, content: str) -> Tuple[Dict, str]:
        """Split a leading YAML front matter block from the markdown body."""
        match = FRONT_MATTER_RE.match(content)
        if not match:
            return {}, content
        try:
            metadata = yaml.safe_load(match.group(1))
        except yaml.YAMLError as e:
            raise RenderError(f"Invalid YAML front matter: {e}")
        if not isinstance(metadata, dict):
            return {}, content
        return metadata, content[match.end():].lstrip('\n')

    def render_to_html(self, content: str, source_format: str, standalone: bool = False) -> str:
        if source_format not in self.SUPPORTED_FORMATS:
            raise RenderError(f"mistune cannot render format '{source_format}'")

        # Only pandoc's markdown reader treats a leading YAML block as metadata
        if source_format == 'markdown':
            metadata, body = self.split_front_matter(content)
        else:
            metadata, body = {}, content
        body_html = self.markdown_parser(body)
        if not standalone:
            return body_html

        title = metadata.get('title')
        title = html.escape(str(title)) if title else ''
        return (
            '<!DOCTYPE html>\n'
            '<html>\n'
            '<head>\n'
            '<meta charset="utf-8" />\n'
            f'<title>{title}</title>\n'
            '</head>\n'
            '<body>\n'
            f'{body_html}'
            '</body>\n'
            '</html>\n'
        )


RENDERERS = {
    'pandoc': PandocRenderer,
    'mistune': MistuneRenderer,
}


def get_renderer(name: str, pandoc_path: str = 'pandoc', timeout: Optional[float] = 60) -> Renderer:
    """Build the renderer registered under ``name``."""
    if name == 'pandoc':
        return PandocRenderer(executable=pandoc_path, timeout=timeout)
    if name in RENDERERS:
        return RENDERERS[name]()
    raise MissingDependencyError(
        f"Unknown renderer '{name}'. Choose one of: {', '.join(sorted(RENDERERS))}."
    )
