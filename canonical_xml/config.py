from pathlib import Path
from typing import Any, Dict

import yaml

from canonical_xml.errors import ConfigError
from canonical_xml.types import Options


def options_from_dict(data: Dict[str, Any], base: Options = Options()) -> Options:
    unknown = set(data) - set(Options._fields)
    if unknown:
        raise ConfigError(f"Unknown option(s): {', '.join(sorted(unknown))}")

    values = base._asdict()
    for key, value in data.items():
        expected = type(values[key])
        # bool is an int subclass, so check it explicitly
        if type(value) is not expected:
            raise ConfigError(
                f"Option {key} must be {expected.__name__}, got {type(value).__name__}"
            )
        values[key] = value

    if values["chunk_size"] <= 0:
        raise ConfigError("Option chunk_size must be positive")
    return Options(**values)


def load_options(path: Path, base: Options = Options()) -> Options:
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e
    if data is None:
        return base
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping of options")
    return options_from_dict(data, base)
