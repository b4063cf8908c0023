"""
Configuration loading for the flight statistics tools.

Uses Python's built-in configparser (no extra dependencies).
Supports config.ini file with CLI argument overrides.
"""

import configparser
import os


DEFAULT_CONFIG = {
    'import': {
        'input_file': '',
        'dayfirst': 'false',
    },
    'export': {
        'output_dir': '.',
        'format': 'json',
    },
    'preview': {
        'rows': '10',
        'top': '6',
    },
}

EXPORT_FORMATS = ('json', 'xlsx', 'none')


class Config:
    """Flight statistics configuration."""

    def __init__(self):
        self.input_file = ''
        self.dayfirst = False
        self.output_dir = '.'
        self.export_format = 'json'
        self.preview_rows = 10
        self.top = 6

    @classmethod
    def from_file(cls, config_path):
        """Load configuration from an INI file.

        A missing file is not an error; the defaults are used.

        Args:
            config_path: Path to the config.ini file.

        Returns:
            Config instance.
        """
        config = cls()
        parser = configparser.ConfigParser()

        # Set defaults
        for section, values in DEFAULT_CONFIG.items():
            parser[section] = values

        # Read user config
        if os.path.exists(config_path):
            try:
                parser.read(config_path, encoding='utf-8')
            except configparser.Error as e:
                raise ValueError(f"Cannot parse {config_path}: {e}") from e

        # Resolve paths relative to config file directory
        config_dir = os.path.dirname(os.path.abspath(config_path))

        for attr, section, key in [
            ('input_file', 'import', 'input_file'),
            ('output_dir', 'export', 'output_dir'),
        ]:
            val = parser.get(section, key, fallback='')
            if val and not os.path.isabs(val):
                val = os.path.join(config_dir, val)
            setattr(config, attr, val)

        try:
            config.dayfirst = parser.getboolean('import', 'dayfirst', fallback=False)
            config.preview_rows = parser.getint('preview', 'rows', fallback=10)
            config.top = parser.getint('preview', 'top', fallback=6)
        except ValueError as e:
            raise ValueError(f"Invalid value in {config_path}: {e}") from e
        config.export_format = parser.get('export', 'format', fallback='json').strip().lower()

        if config.export_format not in EXPORT_FORMATS:
            raise ValueError(
                f"Unknown export format '{config.export_format}' in {config_path}. "
                f"Use one of: {', '.join(EXPORT_FORMATS)}"
            )
        return config

    def override(self, **kwargs):
        """Override config values from CLI arguments.

        Only overrides non-None values.
        """
        for key, value in kwargs.items():
            if value is not None and hasattr(self, key):
                setattr(self, key, value)

    def validate(self):
        """Check that the input file is set and exists.

        Raises:
            FileNotFoundError: If no input is configured or it is missing.
        """
        if not self.input_file:
            raise FileNotFoundError(
                "No input file configured.\n"
                "Pass --input or set input_file in the [import] section."
            )
        if not os.path.exists(self.input_file):
            raise FileNotFoundError(
                f"Input file not found: {self.input_file}\n"
                f"Check the file path in your config.ini."
            )

