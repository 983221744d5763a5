"""Tests for configuration loading."""

import pytest
import os
import json
from pathlib import Path

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from blogconv_pkg.settings import ConverterConfig, ConverterSettings


class TestConverterSettings:
    """Test cases for ConverterSettings."""

    def test_defaults_without_config_file(self, temp_dir):
        settings = ConverterSettings(config_dir=temp_dir).load_settings()
        assert settings == ConverterSettings.DEFAULT_SETTINGS

    def test_load_yaml(self, temp_dir):
        Path(temp_dir, 'blogconv.yml').write_text("output: public/posts\nrenderer: mistune\n")
        loader = ConverterSettings(config_dir=temp_dir)
        settings = loader.load_settings()

        assert settings['output'] == 'public/posts'
        assert settings['renderer'] == 'mistune'
        assert settings['template_header'] == 'template_header.html'
        assert loader.config_file_path == os.path.join(temp_dir, 'blogconv.yml')

    def test_load_json(self, temp_dir):
        Path(temp_dir, 'blogconv.json').write_text(json.dumps({'strict_formats': True}))
        settings = ConverterSettings(config_dir=temp_dir).load_settings()
        assert settings['strict_formats'] is True

    def test_yml_preferred_over_json(self, temp_dir):
        Path(temp_dir, 'blogconv.yml').write_text("output: from-yml\n")
        Path(temp_dir, 'blogconv.json').write_text(json.dumps({'output': 'from-json'}))
        assert ConverterSettings(config_dir=temp_dir).load_settings()['output'] == 'from-yml'

    def test_invalid_yaml_warns_and_uses_defaults(self, temp_dir, capsys):
        Path(temp_dir, 'blogconv.yml').write_text("output: [broken\n")
        settings = ConverterSettings(config_dir=temp_dir).load_settings()

        assert settings == ConverterSettings.DEFAULT_SETTINGS
        assert "Warning: Failed to load config file" in capsys.readouterr().err

    def test_non_mapping_config_warns(self, temp_dir, capsys):
        Path(temp_dir, 'blogconv.yml').write_text("- just\n- a list\n")
        settings = ConverterSettings(config_dir=temp_dir).load_settings()
        assert settings == ConverterSettings.DEFAULT_SETTINGS
        assert "must be a mapping" in capsys.readouterr().err

    def test_merge_with_args_prefers_arguments(self, temp_dir):
        Path(temp_dir, 'blogconv.yml').write_text("output: from-config\nrenderer: mistune\n")
        loader = ConverterSettings(config_dir=temp_dir)
        loader.load_settings()

        merged = loader.merge_with_args({'output': 'from-cli', 'renderer': None, 'input_file': 'x.md'})

        assert merged['output'] == 'from-cli'
        assert merged['renderer'] == 'mistune'
        assert 'input_file' not in merged

    @pytest.mark.parametrize('file_format', ['yml', 'yaml', 'json'])
    def test_sample_config_round_trips_to_defaults(self, temp_dir, file_format):
        """Test a freshly created sample config loads back to the defaults."""
        loader = ConverterSettings(config_dir=temp_dir)
        path = loader.create_sample_config(file_format)

        assert os.path.basename(path) == f'blogconv.{file_format}'
        assert ConverterSettings(config_dir=temp_dir).load_settings() == ConverterSettings.DEFAULT_SETTINGS


class TestConverterConfig:
    """Test cases for ConverterConfig."""

    def test_paths_resolve_against_base_dir(self, temp_dir):
        config = ConverterConfig(base_dir=temp_dir)
        assert config.header_path == os.path.join(temp_dir, 'template_header.html')
        assert config.footer_path == os.path.join(temp_dir, 'template_footer.html')
        assert config.output_path == os.path.join(temp_dir, 'posts')

    def test_absolute_paths_kept(self, temp_dir):
        other = os.path.join(temp_dir, 'elsewhere')
        config = ConverterConfig(base_dir=temp_dir, output_dir=other)
        assert config.output_path == other

    def test_home_expanded_in_output_dir(self, temp_dir):
        config = ConverterConfig(base_dir=temp_dir, output_dir='~/site/posts')
        assert config.output_path == os.path.join(os.path.expanduser('~'), 'site', 'posts')

    def test_defaults_to_working_directory(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        assert ConverterConfig().base_dir == os.getcwd()

    def test_from_settings(self, temp_dir):
        settings = dict(ConverterSettings.DEFAULT_SETTINGS, output='out', allow_empty_body=True, log_dir=None)
        config = ConverterConfig.from_settings(settings, base_dir=temp_dir)

        assert config.output_dir == 'out'
        assert config.allow_empty_body is True
        assert config.strict_formats is False
        assert config.title_marker == '{{TITLE}}'
        assert config.log_dir is None
