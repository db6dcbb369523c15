"""
Configuration Validator
-----------------------
Strict schema check of raw configuration dictionaries against the config
dataclasses. A key that the schema does not define is an error, so a typo in
a YAML file fails at load time instead of being silently ignored.
"""

from dataclasses import fields, is_dataclass
from typing import Dict, Type, Any, Set, get_type_hints


def validate_keys(
    raw_config: Dict[str, Any], data_class: Type[Any], path: str = ""
) -> None:
    """
    Recursively validates that all keys in a raw configuration dictionary exist
    as fields in the target Dataclass schema.

    Args:
        raw_config (Dict[str, Any]): The raw configuration dictionary (usually loaded from YAML).
        data_class (Type[Any]): The Dataclass type definition to validate against.
        path (str, optional): Dot-notation path of the current section, used in messages.

    Raises:
        ValueError: If 'raw_config' is not a mapping or contains keys that are not
            present in 'data_class'.
    """
    error_path = path if path else "root"
    if not isinstance(raw_config, dict):
        raise ValueError(
            f"Config Error: expected a mapping at '{error_path}', "
            f"got {type(raw_config).__name__}"
        )

    allowed_fields: Set[str] = {f.name for f in fields(data_class)}
    unknown_keys = set(raw_config.keys()) - allowed_fields

    if unknown_keys:
        raise ValueError(
            f"Config Error: Unknown keys detected at '{error_path}': {sorted(unknown_keys)}. "
            f"Allowed keys: {sorted(allowed_fields)}"
        )

    # annotations are strings under postponed evaluation; resolve them first
    hints = get_type_hints(data_class)
    for f in fields(data_class):
        sub_type = hints.get(f.name)
        value = raw_config.get(f.name)

        if is_dataclass(sub_type) and f.name in raw_config:
            new_path = f"{path}.{f.name}" if path else f.name
            # an empty or scalar section would replace the whole dataclass
            validate_keys(value, sub_type, path=new_path)
