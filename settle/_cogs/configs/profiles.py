"""
Wait profiles: YAML files with the defaults for the CLI options.

A profile describes how to reach & classify one kind of resources once,
so that only the ids are specified on every invocation::

    server: https://api.example.com
    path: /file-systems
    items-key: FileSystems
    id-key: FileSystemId
    ids-param: FileSystemIds
    state-key: Lifecycle
    pending: [CREATING, UPDATING]
    target: [AVAILABLE]
    timeout: 2700
    delay: 30

The explicitly given CLI options and environment variables override the profile.
"""
import collections.abc
from typing import Any, Dict, Optional

import yaml


class ProfileError(ValueError):
    pass


def load_profile(
        path: str,
        *,
        section: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Read the profile and normalise its keys to the CLI options' names.

    If a section is specified, the profile is taken from that top-level key:
    this allows keeping profiles for several kinds of resources in one file.
    """
    with open(path, 'rt', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if section is not None:
        if not isinstance(data, collections.abc.Mapping) or section not in data:
            raise ProfileError(f"No profile section {section!r} in {path!r}.")
        data = data[section]

    if data is None:
        return {}
    if not isinstance(data, collections.abc.Mapping):
        raise ProfileError(f"The profile must be a mapping, got {type(data).__name__} in {path!r}.")

    normalised: Dict[str, Any] = {}
    for key, value in data.items():
        if not isinstance(key, str):
            raise ProfileError(f"The profile keys must be strings, got {key!r} in {path!r}.")
        name = key.replace('-', '_')
        if name in ('pending', 'target') and isinstance(value, str):
            value = [value]
        normalised[name] = value
    return normalised
