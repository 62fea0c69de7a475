"""
Waiters for the client VPN endpoints.

The endpoints are listed as ``{"ClientVpnEndpoints": [...], "NextToken": "..."}``,
with the state in ``{"Status": {"Code": "available", "Message": "..."}}``.

Unlike many other resources, the deleted endpoints remain listed for a while
with the ``deleted`` state before they disappear completely. Both cases are
considered as a successful deletion.
"""
import asyncio
import functools
from typing import Optional

from settle._cogs.clients import api, fetching
from settle._cogs.configs import configuration
from settle._cogs.helpers import typedefs
from settle._cogs.structs import states
from settle._core.actions import loggers, probing, waiting

VPN_ENDPOINTS_URL = '/client-vpn-endpoints'

STATUS_PENDING_ASSOCIATE = 'pending-associate'
STATUS_AVAILABLE = 'available'
STATUS_DELETING = 'deleting'
STATUS_DELETED = 'deleted'


async def vpn_endpoint_by_id(
        id: str,
        *,
        context: api.APIContext,
        settings: configuration.Settings,
        logger: typedefs.Logger,
        strict: bool = False,
) -> fetching.RawRecord:
    lister = fetching.http_lister(
        VPN_ENDPOINTS_URL,
        items_key='ClientVpnEndpoints',
        ids=[id],
        ids_param='ClientVpnEndpointIds',
        context=context,
        settings=settings,
        logger=logger,
    )
    return await fetching.find_by_id(
        id,
        lister=lister,
        get_id=fetching.field_getter('ClientVpnEndpointId'),
        strict=strict,
    )


def vpn_endpoint_status(
        id: str,
        *,
        context: api.APIContext,
        settings: configuration.Settings,
        logger: typedefs.Logger,
) -> states.Probe[fetching.RawRecord]:
    finder = functools.partial(vpn_endpoint_by_id, id,
                               context=context, settings=settings, logger=logger)
    return probing.status_probe(finder, lambda endpoint: probing.dig(endpoint, 'Status.Code'))


async def vpn_endpoint_deleted(
        id: str,
        *,
        context: api.APIContext,
        settings: configuration.Settings,
        timeout: Optional[float] = None,
        stopper: Optional[asyncio.Event] = None,
        logger: Optional[typedefs.Logger] = None,
) -> Optional[fetching.RawRecord]:
    logger = logger if logger is not None else loggers.ResourceLogger(kind='vpn-endpoint', id=id)
    spec = states.WaitSpec(
        pending={STATUS_PENDING_ASSOCIATE, STATUS_AVAILABLE, STATUS_DELETING},
        target={STATUS_DELETED},
        absence_is_success=True,
        timeout=timeout if timeout is not None else settings.vpnendpoints.deleted_timeout,
        delay=settings.vpnendpoints.deleted_delay,
        what=f"client VPN endpoint {id}",
    )
    probe = vpn_endpoint_status(id, context=context, settings=settings, logger=logger)
    return await waiting.wait_for_state(probe, spec, stopper=stopper, logger=logger)
