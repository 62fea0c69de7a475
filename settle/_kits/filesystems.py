"""
Waiters for the file systems, their aliases, and their administrative actions.

The file systems are listed by the remote API as::

    {
        "FileSystems": [
            {
                "FileSystemId": "fs-0123456789abcdef0",
                "Lifecycle": "AVAILABLE",
                "WindowsConfiguration": {
                    "Aliases": [{"Name": "fs.example.com", "Lifecycle": "CREATING"}]
                },
                "AdministrativeActions": [
                    {"AdministrativeActionType": "FILE_SYSTEM_UPDATE", "Status": "PENDING"}
                ]
            }
        ],
        "NextToken": "..."
    }
"""
import asyncio
import functools
from typing import Collection, List, Optional

from settle._cogs.clients import api, fetching
from settle._cogs.configs import configuration
from settle._cogs.helpers import typedefs
from settle._cogs.structs import states
from settle._core.actions import loggers, probing, waiting

FILE_SYSTEMS_URL = '/file-systems'

LIFECYCLE_AVAILABLE = 'AVAILABLE'
LIFECYCLE_CREATING = 'CREATING'
LIFECYCLE_DELETING = 'DELETING'
LIFECYCLE_UPDATING = 'UPDATING'

ALIAS_LIFECYCLE_AVAILABLE = 'AVAILABLE'
ALIAS_LIFECYCLE_CREATING = 'CREATING'
ALIAS_LIFECYCLE_DELETING = 'DELETING'

ACTION_TYPE_FILE_SYSTEM_UPDATE = 'FILE_SYSTEM_UPDATE'

STATUS_COMPLETED = 'COMPLETED'
STATUS_IN_PROGRESS = 'IN_PROGRESS'
STATUS_PENDING = 'PENDING'
STATUS_UPDATED_OPTIMIZING = 'UPDATED_OPTIMIZING'


def _get_logger(id: str, alias: Optional[str] = None) -> typedefs.Logger:
    if alias is None:
        return loggers.ResourceLogger(kind='file-system', id=id)
    else:
        return loggers.ResourceLogger(kind='file-system/alias', id=alias, parent=id)


async def file_system_by_id(
        id: str,
        *,
        context: api.APIContext,
        settings: configuration.Settings,
        logger: typedefs.Logger,
        strict: bool = False,
) -> fetching.RawRecord:
    lister = fetching.http_lister(
        FILE_SYSTEMS_URL,
        items_key='FileSystems',
        ids=[id],
        ids_param='FileSystemIds',
        context=context,
        settings=settings,
        logger=logger,
    )
    return await fetching.find_by_id(
        id,
        lister=lister,
        get_id=fetching.field_getter('FileSystemId'),
        strict=strict,
    )


def get_aliases(file_system: fetching.RawRecord) -> List[fetching.RawRecord]:
    return (file_system.get('WindowsConfiguration') or {}).get('Aliases') or []


def get_actions(file_system: fetching.RawRecord) -> List[fetching.RawRecord]:
    return file_system.get('AdministrativeActions') or []


def find_alias(file_system: fetching.RawRecord, alias: str) -> Optional[fetching.RawRecord]:
    locate = probing.first_match(get_aliases, lambda a: a.get('Name') == alias)
    return locate(file_system)


def file_system_status(
        id: str,
        *,
        context: api.APIContext,
        settings: configuration.Settings,
        logger: typedefs.Logger,
) -> states.Probe[fetching.RawRecord]:
    finder = functools.partial(file_system_by_id, id,
                               context=context, settings=settings, logger=logger)
    return probing.status_probe(finder, lambda fs: fs.get('Lifecycle'))


def alias_status(
        id: str,
        alias: str,
        *,
        context: api.APIContext,
        settings: configuration.Settings,
        logger: typedefs.Logger,
) -> states.Probe[fetching.RawRecord]:
    finder = functools.partial(file_system_by_id, id,
                               context=context, settings=settings, logger=logger)
    locate = functools.partial(find_alias, alias=alias)
    return probing.nested_status_probe(finder, locate, lambda a: a.get('Lifecycle'))


def administrative_action_status(
        id: str,
        *,
        action_type: str = ACTION_TYPE_FILE_SYSTEM_UPDATE,
        treat_no_match_as: states.StateLabel = STATUS_COMPLETED,
        context: api.APIContext,
        settings: configuration.Settings,
        logger: typedefs.Logger,
) -> states.Probe[fetching.RawRecord]:
    finder = functools.partial(file_system_by_id, id,
                               context=context, settings=settings, logger=logger)
    locate = probing.first_match(get_actions, lambda a: a.get('AdministrativeActionType') == action_type)
    return probing.action_status_probe(finder, locate, lambda a: a.get('Status'),
                                       treat_no_match_as=treat_no_match_as)


async def file_system_available(
        id: str,
        *,
        context: api.APIContext,
        settings: configuration.Settings,
        timeout: Optional[float] = None,
        stopper: Optional[asyncio.Event] = None,
        logger: Optional[typedefs.Logger] = None,
) -> Optional[fetching.RawRecord]:
    logger = logger if logger is not None else _get_logger(id)
    spec = states.WaitSpec(
        pending={LIFECYCLE_CREATING, LIFECYCLE_UPDATING},
        target={LIFECYCLE_AVAILABLE},
        timeout=timeout if timeout is not None else settings.filesystems.create_timeout,
        delay=settings.filesystems.available_delay,
        what=f"file system {id}",
    )
    probe = file_system_status(id, context=context, settings=settings, logger=logger)
    return await waiting.wait_for_state(probe, spec, stopper=stopper, logger=logger)


async def file_system_deleted(
        id: str,
        *,
        context: api.APIContext,
        settings: configuration.Settings,
        timeout: Optional[float] = None,
        stopper: Optional[asyncio.Event] = None,
        logger: Optional[typedefs.Logger] = None,
) -> Optional[fetching.RawRecord]:
    logger = logger if logger is not None else _get_logger(id)
    spec = states.WaitSpec(
        pending={LIFECYCLE_AVAILABLE, LIFECYCLE_DELETING},
        target=set(),
        timeout=timeout if timeout is not None else settings.filesystems.delete_timeout,
        delay=settings.filesystems.deleted_delay,
        what=f"file system {id}",
    )
    probe = file_system_status(id, context=context, settings=settings, logger=logger)
    return await waiting.wait_for_state(probe, spec, stopper=stopper, logger=logger)


async def alias_available(
        id: str,
        alias: str,
        *,
        context: api.APIContext,
        settings: configuration.Settings,
        timeout: Optional[float] = None,
        stopper: Optional[asyncio.Event] = None,
        logger: Optional[typedefs.Logger] = None,
) -> Optional[fetching.RawRecord]:
    """
    Wait for an alias to become available; return the alias, not the file system.

    The aliases are not always listed right after they are associated,
    so the absence of the alias is tolerated as long as the time allows.
    The absence of the file system itself is not: it will never have the alias.
    """
    logger = logger if logger is not None else _get_logger(id, alias)
    spec = states.WaitSpec(
        pending={ALIAS_LIFECYCLE_CREATING, states.ELEMENT_NOT_FOUND},
        target={ALIAS_LIFECYCLE_AVAILABLE},
        timeout=timeout if timeout is not None else settings.filesystems.alias_available_timeout,
        delay=settings.filesystems.alias_delay,
        backoff=settings.filesystems.alias_backoff,
        max_delay=settings.filesystems.alias_max_delay,
        what=f"alias {alias} of file system {id}",
    )
    probe = alias_status(id, alias, context=context, settings=settings, logger=logger)
    file_system = await waiting.wait_for_state(probe, spec, stopper=stopper, logger=logger)
    return find_alias(file_system, alias) if file_system is not None else None


async def alias_deleted(
        id: str,
        alias: str,
        *,
        context: api.APIContext,
        settings: configuration.Settings,
        timeout: Optional[float] = None,
        stopper: Optional[asyncio.Event] = None,
        logger: Optional[typedefs.Logger] = None,
) -> Optional[fetching.RawRecord]:
    """
    Wait for an alias to disappear; return the file system as last seen without it.

    If the file system is gone too, so is the alias, and the result is ``None``.
    """
    logger = logger if logger is not None else _get_logger(id, alias)
    spec = states.WaitSpec(
        pending={ALIAS_LIFECYCLE_DELETING},
        target={states.ELEMENT_NOT_FOUND},
        absence_is_success=True,
        timeout=timeout if timeout is not None else settings.filesystems.alias_deleted_timeout,
        delay=settings.filesystems.alias_delay,
        backoff=settings.filesystems.alias_backoff,
        max_delay=settings.filesystems.alias_max_delay,
        what=f"alias {alias} of file system {id}",
    )
    probe = alias_status(id, alias, context=context, settings=settings, logger=logger)
    return await waiting.wait_for_state(probe, spec, stopper=stopper, logger=logger)


async def aliases_available(
        id: str,
        aliases: Collection[str],
        *,
        context: api.APIContext,
        settings: configuration.Settings,
        cancel_on_failure: bool = False,
        stopper: Optional[asyncio.Event] = None,
        logger: Optional[typedefs.Logger] = None,
) -> List[Optional[fetching.RawRecord]]:
    """
    Wait for all the aliases concurrently, as after they are associated in a batch.
    """
    return await waiting.wait_for_all([
        alias_available(id, alias, context=context, settings=settings, stopper=stopper)
        for alias in aliases
    ], title=f"aliases of file system {id}", cancel_on_failure=cancel_on_failure,
        logger=logger if logger is not None else _get_logger(id))


async def aliases_deleted(
        id: str,
        aliases: Collection[str],
        *,
        context: api.APIContext,
        settings: configuration.Settings,
        cancel_on_failure: bool = False,
        stopper: Optional[asyncio.Event] = None,
        logger: Optional[typedefs.Logger] = None,
) -> List[Optional[fetching.RawRecord]]:
    return await waiting.wait_for_all([
        alias_deleted(id, alias, context=context, settings=settings, stopper=stopper)
        for alias in aliases
    ], title=f"aliases of file system {id}", cancel_on_failure=cancel_on_failure,
        logger=logger if logger is not None else _get_logger(id))


async def administrative_actions_completed_or_optimizing(
        id: str,
        *,
        context: api.APIContext,
        settings: configuration.Settings,
        action_type: str = ACTION_TYPE_FILE_SYSTEM_UPDATE,
        timeout: Optional[float] = None,
        stopper: Optional[asyncio.Event] = None,
        logger: Optional[typedefs.Logger] = None,
) -> Optional[fetching.RawRecord]:
    logger = logger if logger is not None else _get_logger(id)
    spec = states.WaitSpec(
        pending={STATUS_IN_PROGRESS, STATUS_PENDING},
        target={STATUS_COMPLETED, STATUS_UPDATED_OPTIMIZING},
        timeout=timeout if timeout is not None else settings.filesystems.update_timeout,
        delay=settings.filesystems.actions_delay,
        what=f"{action_type} of file system {id}",
    )
    probe = administrative_action_status(id, action_type=action_type,
                                         context=context, settings=settings, logger=logger)
    return await waiting.wait_for_state(probe, spec, stopper=stopper, logger=logger)
