"""
The main Settle module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the library's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from settle._cogs.clients.api import (
    APIContext,
)
from settle._cogs.clients.errors import (
    NotFoundError,
    APIError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
    APIServerError,
)
from settle._cogs.clients.fetching import (
    Page,
    Lister,
    DuplicateResourceError,
    iter_pages,
    find_by_id,
    field_getter,
    http_lister,
)
from settle._cogs.configs.configuration import (
    Settings,
    NetworkingSettings,
    WaitingSettings,
    FileSystemSettings,
    VpnEndpointSettings,
)
from settle._cogs.helpers.typedefs import (
    Logger,
)
from settle._cogs.helpers.versions import (
    version as __version__,
)
from settle._cogs.structs.states import (
    StateLabel,
    NOT_FOUND,
    UNKNOWN,
    ELEMENT_NOT_FOUND,
    Reading,
    Probe,
    WaitSpec,
)
from settle._core.actions.loggers import (
    LogFormat,
    ResourceLogger,
    configure,
)
from settle._core.actions.probing import (
    status_probe,
    nested_status_probe,
    action_status_probe,
    first_match,
    dig,
)
from settle._core.actions.waiting import (
    WaitError,
    WaitTransportError,
    UnexpectedStateError,
    WaitTimeoutError,
    WaitCancelledError,
    wait_for_state,
    wait_for_all,
)
from settle._kits import (
    filesystems,
    vpnendpoints,
)

__all__ = [
    'APIContext',
    'NotFoundError',
    'APIError',
    'APIUnauthorizedError',
    'APIForbiddenError',
    'APINotFoundError',
    'APIConflictError',
    'APIServerError',
    'Page',
    'Lister',
    'DuplicateResourceError',
    'iter_pages',
    'find_by_id',
    'field_getter',
    'http_lister',
    'Settings',
    'NetworkingSettings',
    'WaitingSettings',
    'FileSystemSettings',
    'VpnEndpointSettings',
    'Logger',
    '__version__',
    'StateLabel',
    'NOT_FOUND',
    'UNKNOWN',
    'ELEMENT_NOT_FOUND',
    'Reading',
    'Probe',
    'WaitSpec',
    'LogFormat',
    'ResourceLogger',
    'configure',
    'status_probe',
    'nested_status_probe',
    'action_status_probe',
    'first_match',
    'dig',
    'WaitError',
    'WaitTransportError',
    'UnexpectedStateError',
    'WaitTimeoutError',
    'WaitCancelledError',
    'wait_for_state',
    'wait_for_all',
    'filesystems',
    'vpnendpoints',
]
