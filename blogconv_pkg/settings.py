#!/usr/bin/env python3
"""
Settings loader for the blogconv document converter.
Supports configuration from blogconv.yml, blogconv.yaml, or blogconv.json files.
"""

import os
import sys
import json
import yaml
from typing import Dict, Any, Optional


class ConverterSettings:
    """Load and manage converter configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'output': 'posts',
        'template_header': 'template_header.html',
        'template_footer': 'template_footer.html',
        'title_marker': '{{TITLE}}',
        'renderer': 'pandoc',
        'pandoc_path': 'pandoc',
        'render_timeout': 60,
        'strict_formats': False,
        'allow_empty_body': False,
        'log_dir': 'logs'
    }

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['blogconv.yml', 'blogconv.yaml', 'blogconv.json']

    def __init__(self, config_dir: str = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Directory to look for config files. Defaults to current directory.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = self.DEFAULT_SETTINGS.copy()
        self.config_file_path = None

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from configuration file if it exists.

        Returns:
            Dictionary of configuration settings
        """
        config_file = self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            try:
                loaded_settings = self._load_config_file(config_file)
                if loaded_settings:
                    if not isinstance(loaded_settings, dict):
                        raise ValueError("top-level value must be a mapping")
                    # Merge with defaults, giving preference to loaded settings
                    self.settings.update(loaded_settings)
            except Exception as e:
                print(f"Warning: Failed to load config file {config_file}: {e}", file=sys.stderr)

        return self.settings.copy()

    def _find_config_file(self) -> Optional[str]:
        """
        Find the first available configuration file.

        Returns:
            Path to config file or None if not found
        """
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        try:
            file_ext = os.path.splitext(config_path)[1].lower()

            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext in ['.yml', '.yaml']:
                    return yaml.safe_load(f) or {}
                elif file_ext == '.json':
                    return json.load(f) or {}
                else:
                    raise ValueError(f"Unsupported config file format: {file_ext}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}")

    def create_sample_config(self, file_format: str = 'yml') -> str:
        """
        Create a sample configuration file.

        Args:
            file_format: Format for config file ('yml', 'yaml', or 'json')

        Returns:
            Path to created sample config file
        """
        filename = f'blogconv.{file_format}'
        config_path = os.path.join(self.config_dir, filename)

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                if file_format in ['yml', 'yaml']:
                    f.write("# blogconv configuration file\n\n")
                    f.write("# Where converted pages are written\n")
                    f.write("output: posts\n\n")
                    f.write("# Page chrome wrapped around every converted document\n")
                    f.write("template_header: template_header.html\n")
                    f.write("template_footer: template_footer.html\n")
                    f.write("title_marker: '{{TITLE}}'\n\n")
                    f.write("# Rendering engine: pandoc or mistune (markdown only)\n")
                    f.write("renderer: pandoc\n")
                    f.write("pandoc_path: pandoc\n")
                    f.write("render_timeout: 60\n\n")
                    f.write("# Reject extensions other than .txt, .md and .org\n")
                    f.write("strict_formats: false\n")
                    f.write("# Accept an empty body when the source itself is blank\n")
                    f.write("allow_empty_body: false\n\n")
                    f.write("log_dir: logs\n")
                elif file_format == 'json':
                    json.dump(self.DEFAULT_SETTINGS, f, indent=2)
                else:
                    raise ValueError(f"Unsupported config file format: {file_format}")
        except PermissionError:
            raise PermissionError(f"Permission denied creating configuration file: {config_path}")

        return config_path

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file settings.

        Args:
            args_dict: Dictionary of command-line arguments

        Returns:
            Merged configuration dictionary
        """
        merged = self.settings.copy()

        for key, value in args_dict.items():
            if value is not None and key in self.DEFAULT_SETTINGS:
                merged[key] = value

        return merged


class ConverterConfig:
    """Resolved configuration handed to a DocumentConverter."""

    def __init__(self, base_dir=None, output_dir='posts', template_header='template_header.html',
                 template_footer='template_footer.html', title_marker='{{TITLE}}', renderer='pandoc',
                 pandoc_path='pandoc', render_timeout=60, strict_formats=False, allow_empty_body=False,
                 log_dir='logs'):
        self.base_dir = os.path.abspath(base_dir or os.getcwd())
        output_dir = str(output_dir)
        self.output_dir = os.path.expanduser(output_dir) if output_dir.startswith("~/") else output_dir
        self.template_header = template_header
        self.template_footer = template_footer
        self.title_marker = title_marker
        self.renderer = renderer
        self.pandoc_path = pandoc_path
        self.render_timeout = render_timeout
        self.strict_formats = bool(strict_formats)
        self.allow_empty_body = bool(allow_empty_body)
        self.log_dir = log_dir

    @classmethod
    def from_settings(cls, settings: Dict[str, Any], base_dir: str = None) -> 'ConverterConfig':
        """Build a config from a merged settings dictionary."""
        return cls(
            base_dir=base_dir,
            output_dir=settings.get('output', 'posts'),
            template_header=settings.get('template_header', 'template_header.html'),
            template_footer=settings.get('template_footer', 'template_footer.html'),
            title_marker=settings.get('title_marker', '{{TITLE}}'),
            renderer=settings.get('renderer', 'pandoc'),
            pandoc_path=settings.get('pandoc_path', 'pandoc'),
            render_timeout=settings.get('render_timeout', 60),
            strict_formats=settings.get('strict_formats', False),
            allow_empty_body=settings.get('allow_empty_body', False),
            log_dir=settings.get('log_dir', 'logs')
        )

    def resolve(self, path: str) -> str:
        """Resolve a configured path against base_dir."""
        return os.path.join(self.base_dir, path)

    @property
    def header_path(self) -> str:
        return self.resolve(self.template_header)

    @property
    def footer_path(self) -> str:
        return self.resolve(self.template_footer)

    @property
    def output_path(self) -> str:
        return self.resolve(self.output_dir)
