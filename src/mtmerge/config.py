"""Column fragment configuration, optionally loaded from a YAML file."""

from pathlib import Path

import yaml

from .common import ConfigError


# Header fragments used to locate each of the six lookup columns.
DEFAULT_COLUMNS = {
    'source_key': 'GitHub ID',
    'source_value': 'Score',
    'map_source': 'GitHub ID',
    'map_dest': 'SIS Login ID',
    'dest_key': 'SIS Login ID',
    'dest_value': 'Project01-Automated',
}


def load_columns(config_file=None, overrides=None):
    """
    Build the column fragment mapping.

    Values from the ``columns`` section of a YAML config file replace the
    defaults, and non-empty ``overrides`` (typically from CLI flags) replace
    both. Example file:

        columns:
          source_value: Total
          dest_value: Project02-Automated

    Returns:
        Dictionary with the six keys of DEFAULT_COLUMNS
    """
    columns = dict(DEFAULT_COLUMNS)

    if config_file:
        path = Path(config_file)
        if not path.exists():
            raise ConfigError(f"Config file not found: {config_file}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse {config_file}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict) or not isinstance(data.get('columns', {}), dict):
            raise ConfigError(f"{config_file}: expected a 'columns' mapping")
        columns.update(_checked(data.get('columns', {}), config_file))

    if overrides:
        columns.update(_checked({k: v for k, v in overrides.items() if v}, 'overrides'))

    return columns


def _checked(values, origin):
    unknown = sorted(set(values) - set(DEFAULT_COLUMNS))
    if unknown:
        raise ConfigError(
            f"{origin}: unknown column keys: {', '.join(unknown)} "
            f"(expected: {', '.join(DEFAULT_COLUMNS)})"
        )
    for key, value in values.items():
        if not isinstance(value, str) or not value:
            raise ConfigError(f"{origin}: column '{key}' must be a non-empty string")
    return values
