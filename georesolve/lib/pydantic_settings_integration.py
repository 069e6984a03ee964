import logging
from collections.abc import Callable
from sys import modules
from typing import Any, get_type_hints

from pydantic import create_model
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_CONFIG = SettingsConfigDict(
    env_prefix='GEORESOLVE_',
    env_file='.env',
    env_file_encoding='utf-8',
    extra='ignore',
)


def _is_setting_name(name: str) -> bool:
    return name[:1] != '_' and name.isupper()


def pydantic_settings_integration(
    caller_name: str,
    caller_globals: dict[str, Any],
    /,
    config: SettingsConfigDict = _DEFAULT_CONFIG,
    name_filter: Callable[[str], bool] = _is_setting_name,
) -> list[str]:
    """
    Load the UPPER_CASE globals of the calling module as pydantic settings.

    Values are read from the environment and the .env file, validated against
    the module annotations, and written back into the module globals.
    Returns the names of the settings whose value changed.
    """
    defaults = {k: v for k, v in caller_globals.items() if name_filter(k)}
    if not defaults:
        logging.warning('No settings found in %s matching the filter', caller_name)
        return []

    type_hints = get_type_hints(modules[caller_name], caller_globals)
    fields: dict[str, tuple[type, Any]] = {
        name: (
            type_hints.get(name, Any if isinstance(value, FieldInfo) else type(value)),
            value,
        )
        for name, value in defaults.items()
    }

    settings_type = create_model(
        f'{caller_name}_DynamicSettings',
        __base__=type(
            f'{caller_name}_DynamicBaseSettings',
            (BaseSettings,),
            {'model_config': config},
        ),
        **fields,  # type: ignore
    )
    settings = settings_type()

    changed: list[str] = []
    for name, default in defaults.items():
        value = getattr(settings, name)
        if not isinstance(default, FieldInfo) and value != default:
            changed.append(name)
        caller_globals[name] = value

    if changed:
        logging.debug('Settings overridden in %s: %s', caller_name, ', '.join(changed))
    return changed
