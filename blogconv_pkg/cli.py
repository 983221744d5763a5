#!/usr/bin/env python3
"""
Command-line interface for blogconv - single document to HTML page converter.
"""

import os
import sys
import argparse
from typing import List, Optional
from . import __version__
from .core import DocumentConverter
from .errors import ConverterError, UsageError
from .settings import ConverterSettings, ConverterConfig

SAMPLE_HEADER = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{{TITLE}}</title>
    <link rel="stylesheet" href="../style.css">
</head>
<body>
    <header>
        <nav>
            <a href="../index.html">Home</a>
            <a href="../about.html">About</a>
        </nav>
    </header>
    <main>
        <article>
            <h1>{{TITLE}}</h1>
"""

SAMPLE_FOOTER = """        </article>
    </main>
    <footer>
        <p><a href="../index.html">Back to all posts</a></p>
    </footer>
</body>
</html>
"""


def create_starter_templates(target_dir: str, header_name: str, footer_name: str) -> None:
    """Write starter header and footer templates, leaving existing files alone."""
    for name, content in ((header_name, SAMPLE_HEADER), (footer_name, SAMPLE_FOOTER)):
        path = os.path.join(target_dir, name)
        if os.path.exists(path):
            print(f"Template already exists: {name}")
        else:
            with open(path, 'w', encoding='utf-8') as f:
                f.write(content)
            print(f"Created template: {name}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='convert',
        description='Convert a .md, .org or .txt file to an HTML page using custom templates.'
    )
    parser.add_argument('input_file', nargs='?',
                        help='Source document (.md, .org or .txt)')
    parser.add_argument('--output', type=str,
                        help='Output directory for the generated page')
    parser.add_argument('--header', dest='template_header', type=str,
                        help='Header template file')
    parser.add_argument('--footer', dest='template_footer', type=str,
                        help='Footer template file')
    parser.add_argument('--marker', dest='title_marker', type=str,
                        help='Title placeholder in the header template')
    parser.add_argument('--renderer', type=str, choices=['pandoc', 'mistune'],
                        help='Rendering engine')
    parser.add_argument('--pandoc', dest='pandoc_path', type=str,
                        help='Path to the pandoc executable')
    parser.add_argument('--strict-formats', action='store_true', default=None,
                        help='Reject extensions other than .txt, .md and .org')
    parser.add_argument('--allow-empty-body', action='store_true', default=None,
                        help='Accept an empty body when the source document is blank')
    parser.add_argument('--init', type=str, choices=['yml', 'yaml', 'json'],
                        help='Create a sample configuration file and starter templates')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits with 2 on bad arguments; every failure here is status 1
        sys.exit(0 if e.code in (0, None) else 1)

    settings_loader = ConverterSettings()

    # Handle init command
    if args.init:
        config_path = settings_loader.create_sample_config(args.init)
        print(f"Created sample configuration file: {config_path}")
        create_starter_templates(
            settings_loader.config_dir,
            ConverterSettings.DEFAULT_SETTINGS['template_header'],
            ConverterSettings.DEFAULT_SETTINGS['template_footer']
        )
        return

    settings_loader.load_settings()

    # Command line arguments take precedence over the config file
    args_dict = {k: v for k, v in vars(args).items() if v is not None}
    final_settings = settings_loader.merge_with_args(args_dict)

    try:
        config = ConverterConfig.from_settings(final_settings, base_dir=settings_loader.config_dir)
        converter = DocumentConverter(config)
        result = converter.convert(args.input_file)
    except UsageError:
        parser.print_usage(sys.stdout)
        print("Converts .md, .org, or .txt files to HTML using pandoc and custom templates.")
        sys.exit(1)
    except ConverterError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Successfully converted '{result['input_path']}' to '{result['output_path']}'")
    print(f"Title used: {result['title']}")


if __name__ == '__main__':
    main()
