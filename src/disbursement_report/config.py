"""Configuration handling for the disbursement report tooling.

Settings live in an optional ``config.ini``::

    [Report]
    Label = Disbursement Report
    OutputDirectory = reports

``Label`` prefixes the generated file name and ``OutputDirectory`` is where
``build`` writes reports. Without any config file the defaults apply.
"""

from __future__ import annotations

import configparser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from . import log
from .constants import DEFAULT_REPORT_LABEL


CONFIG_FILE_NAME = "config.ini"
REPORT_SECTION = "Report"


@dataclass(frozen=True)
class ReportSettings:
    """Typed representation of the ``config.ini`` settings we care about."""

    label: str = DEFAULT_REPORT_LABEL
    output_directory: Path = field(default_factory=Path.cwd)


def find_config_file(explicit_path: Optional[Path] = None) -> Path:
    """Locate ``config.ini``.

    An explicit path is returned untouched. Otherwise the search walks up from
    the current working directory and returns the first ``config.ini`` found.

    Raises:
        FileNotFoundError: If no parent directory holds ``CONFIG_FILE_NAME``.
    """

    if explicit_path:
        return explicit_path

    current = Path.cwd()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.exists():
            return candidate

    raise FileNotFoundError(f"Configuration file not found: {CONFIG_FILE_NAME}")


def read_config(config_path: Path) -> configparser.ConfigParser:
    """Load ``config_path`` into a ``ConfigParser``.

    Raises:
        FileNotFoundError: If the file does not exist after expansion.
    """

    config_path = Path(config_path).expanduser().resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    parser = configparser.ConfigParser()
    parser.read(config_path, encoding="utf-8")
    return parser


def parse_settings(parser: configparser.ConfigParser, *, base_path: Optional[Path] = None) -> ReportSettings:
    """Convert a ``ConfigParser`` into :class:`ReportSettings`.

    Both options of the ``[Report]`` section are optional, the section itself
    is not. A relative ``OutputDirectory`` is anchored at ``base_path``
    (defaults to the current working directory) and resolved.

    Raises:
        KeyError: If the ``[Report]`` section is missing.
    """

    if not parser.has_section(REPORT_SECTION):
        raise KeyError(f"Missing required configuration section: [{REPORT_SECTION}]")

    label = parser.get(REPORT_SECTION, "Label", fallback=DEFAULT_REPORT_LABEL).strip() or DEFAULT_REPORT_LABEL
    output_raw = parser.get(REPORT_SECTION, "OutputDirectory", fallback=None)

    if base_path is None:
        base_path = Path.cwd()
    output_directory = Path(output_raw).expanduser() if output_raw else Path(".")
    if not output_directory.is_absolute():
        output_directory = base_path / output_directory

    return ReportSettings(label=label, output_directory=output_directory.resolve())


def load_settings(config_path: Optional[Path] = None) -> ReportSettings:
    """Resolve, read and parse the configuration.

    When ``config_path`` is omitted and no ``config.ini`` exists up the
    directory tree, default settings are returned.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
        KeyError: If the file lacks the ``[Report]`` section.
    """

    try:
        located = find_config_file(config_path)
    except FileNotFoundError:
        log.info("No %s found; using default report settings", CONFIG_FILE_NAME)
        return ReportSettings()

    resolved = Path(located).expanduser().resolve()
    parser = read_config(resolved)
    settings = parse_settings(parser, base_path=resolved.parent)
    log.info("Loaded report settings from '%s'", resolved)
    return settings
