import os
import re
import time
import logging
from datetime import datetime
from typing import Dict, Optional

from .errors import (
    ConversionFailureError,
    InputNotFoundError,
    MissingDependencyError,
    RenderError,
    TemplateNotFoundError,
    UnsupportedFormatError,
    UsageError,
)
from .renderers import Renderer, extract_html_title, get_renderer
from .settings import ConverterConfig

# Extension -> renderer format name. Matching is case-sensitive.
FORMATS = {
    'txt': 'commonmark',
    'md': 'markdown',
    'org': 'org',
}

PLAIN_EXTENSION = 'txt'

# Title pandoc puts in <title> for untitled input read from stdin.
PLACEHOLDER_TITLES = ('-',)


def split_filename(path):
    """Return (filename, stem, extension) for a path; extension has no dot."""
    filename = os.path.basename(path)
    stem, ext = os.path.splitext(filename)
    return filename, stem, ext[1:]


def classify_format(filename, strict=False):
    """Map a filename to the format name handed to the renderer."""
    _, _, ext = split_filename(filename)
    if not ext:
        raise UnsupportedFormatError(f"Cannot determine the format of '{filename}' (no extension).")
    if ext in FORMATS:
        return FORMATS[ext]
    if strict:
        raise UnsupportedFormatError(
            f"Unsupported extension '.{ext}'. Expected one of: .txt, .md, .org."
        )
    return ext


def title_from_filename(stem):
    """my-cool-post -> My Cool Post"""
    spaced = stem.replace('-', ' ')
    return re.sub(r'(^|\s)(\S)', lambda m: m.group(1) + m.group(2).upper(), spaced)


def substitute_title(header, title, marker='{{TITLE}}'):
    """Replace every occurrence of marker in header with title, verbatim."""
    if not marker:
        return header
    return header.replace(marker, title)


def assemble_page(header, body, footer):
    """Join the processed header, rendered body and footer into one page."""
    return header.rstrip('\n') + '\n' + body.rstrip('\n') + '\n' + footer


class SourceDocument:
    """A single input file read into memory."""

    def __init__(self, path, source_format, raw):
        self.path = path
        self.filename, self.stem, self.extension = split_filename(path)
        self.format = source_format
        self.raw = raw
        try:
            self.text = raw.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ConversionFailureError(f"Input file '{path}' is not valid UTF-8: {e}")

    @property
    def is_plain(self):
        return self.extension == PLAIN_EXTENSION

    def split_first_line(self):
        """Return (first_line, remaining_text) of the document."""
        first_line, _, rest = self.text.partition('\n')
        return first_line, rest


class ConsoleFilter(logging.Filter):
    """Filter to allow only warnings and selected INFO messages on the console."""
    def filter(self, record):
        if record.levelno >= logging.WARNING:
            return True
        allowed_messages = [
            "Conversion completed in",
        ]
        return any(msg in record.getMessage() for msg in allowed_messages)


class DocumentConverter:
    """Convert one source document into a themed HTML page."""

    def __init__(self, config: Optional[ConverterConfig] = None, renderer: Optional[Renderer] = None):
        self.config = config or ConverterConfig()
        self.setup_logging()
        if renderer is None:
            renderer = get_renderer(
                self.config.renderer,
                pandoc_path=self.config.pandoc_path,
                timeout=self.config.render_timeout
            )
        self.renderer = renderer

    def setup_logging(self):
        """Set up logging configuration."""
        self.logger = logging.getLogger('blogconv')
        self.logger.setLevel(logging.DEBUG)

        if not self.logger.handlers:
            # Console handler with filter
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.INFO)
            console_handler.addFilter(ConsoleFilter())
            console_handler.setFormatter(logging.Formatter('%(message)s'))
            self.logger.addHandler(console_handler)

    def attach_log_file(self):
        """Add the DEBUG file handler. Called only once preflight has passed."""
        if not self.config.log_dir:
            return
        if any(isinstance(h, logging.FileHandler) for h in self.logger.handlers):
            return
        logs_dir = self.config.resolve(self.config.log_dir)
        os.makedirs(logs_dir, exist_ok=True)
        log_filename = datetime.now().strftime('blogconv_%Y-%m-%d_%H-%M-%S.log')
        file_handler = logging.FileHandler(os.path.join(logs_dir, log_filename), encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        file_handler.setFormatter(file_formatter)
        self.logger.addHandler(file_handler)

    def preflight(self, input_path):
        """Check the renderer, the input file and both templates before any work."""
        if not self.renderer.is_available():
            raise MissingDependencyError(
                f"{self.renderer.name} could not be found. Please install {self.renderer.name}."
            )
        if not input_path:
            raise UsageError("No input file given.")
        if not os.path.isfile(input_path):
            raise InputNotFoundError(f"Input file '{input_path}' not found.")
        if not os.path.isfile(self.config.header_path):
            raise TemplateNotFoundError(f"Template header '{self.config.template_header}' not found.")
        if not os.path.isfile(self.config.footer_path):
            raise TemplateNotFoundError(f"Template footer '{self.config.template_footer}' not found.")
        self.logger.debug(f"Preflight passed for {input_path}")

    def load_document(self, input_path) -> SourceDocument:
        """Classify and read the input file."""
        source_format = classify_format(input_path, strict=self.config.strict_formats)
        try:
            with open(input_path, 'rb') as f:
                raw = f.read()
        except (IOError, OSError) as e:
            raise InputNotFoundError(f"Failed to read input file '{input_path}': {e}")
        self.logger.debug(f"Classified {input_path} as '{source_format}'")
        return SourceDocument(input_path, source_format, raw)

    def body_source(self, document: SourceDocument) -> str:
        """Text handed to the renderer for the page body."""
        if document.is_plain:
            return document.split_first_line()[1]
        return document.text

    def scrape_title(self, document: SourceDocument) -> str:
        """Render the whole document standalone and pull out its <title>."""
        try:
            standalone = self.renderer.render_to_html(document.text, document.format, standalone=True)
        except RenderError as e:
            self.logger.debug(f"Could not read title metadata from {document.filename}: {e}")
            return ''
        title = extract_html_title(standalone)
        if title in PLACEHOLDER_TITLES:
            return ''
        return title

    def resolve_title(self, document: SourceDocument) -> str:
        """Resolve a non-empty title for the document."""
        if document.is_plain:
            title = document.split_first_line()[0].strip()
        else:
            title = self.scrape_title(document)

        if not title:
            title = title_from_filename(document.stem)
            self.logger.debug(f"No title found in {document.filename}, using '{title}'")
        return title

    def render_body(self, document: SourceDocument) -> str:
        """Render the page body, failing on renderer errors and empty output."""
        source = self.body_source(document)
        try:
            body = self.renderer.render_to_html(source, document.format)
        except RenderError as e:
            raise ConversionFailureError(f"Conversion failed for '{document.path}': {e}")

        if not body or not body.strip():
            if self.config.allow_empty_body and not source.strip():
                self.logger.debug(f"{document.filename} is blank, writing an empty body")
                return ''
            raise ConversionFailureError(
                f"{self.renderer.name} conversion failed or produced empty output for '{document.path}'."
            )
        return body

    def read_template(self, path, label):
        # newline='' keeps CRLF templates byte-for-byte
        try:
            with open(path, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except (IOError, OSError) as e:
            raise TemplateNotFoundError(f"Failed to read template {label} '{path}': {e}")

    def output_file_for(self, document: SourceDocument) -> str:
        return os.path.join(self.config.output_path, document.stem + '.html')

    def write_output(self, document: SourceDocument, title, body) -> str:
        """Assemble the page and write it to the output directory."""
        header = self.read_template(self.config.header_path, 'header')
        footer = self.read_template(self.config.footer_path, 'footer')
        page = assemble_page(substitute_title(header, title, self.config.title_marker), body, footer)

        os.makedirs(self.config.output_path, exist_ok=True)
        output_file_path = self.output_file_for(document)
        with open(output_file_path, 'w', encoding='utf-8', newline='') as f:
            f.write(page)
        self.logger.debug(f"Generated HTML: {output_file_path}")
        return output_file_path

    def convert(self, input_path) -> Dict[str, str]:
        """Run the whole pipeline for one file and return what was produced."""
        start_time = time.time()
        self.preflight(input_path)
        self.attach_log_file()
        self.logger.info(f"Converting {input_path}")

        document = self.load_document(input_path)
        title = self.resolve_title(document)
        body = self.render_body(document)
        output_path = self.write_output(document, title, body)

        self.logger.info(f"Conversion completed in {time.time() - start_time:.6f} seconds.")
        return {
            'input_path': input_path,
            'output_path': output_path,
            'title': title,
            'format': document.format,
        }
