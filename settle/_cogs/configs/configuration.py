"""
All configuration flags, options, settings to fine-tune the waiters.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

There are no module-level constants for delays & timeouts anywhere
in the library: every waiter gets the settings object explicitly
and takes its defaults from there. As such, different callers can use
different settings in the same process without affecting each other.

All durations are measured in seconds.
"""
import dataclasses
from typing import Optional


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 5 * 60  # == aiohttp.client.DEFAULT_TIMEOUT
    """
    A timeout for the whole API request (a single page of a listing).
    """

    connect_timeout: Optional[float] = None
    """
    A timeout for establishing a connection to the API server.
    """


@dataclasses.dataclass
class WaitingSettings:
    """
    Generic defaults of the engine, used when a waiter is not told otherwise.
    """

    delay: float = 10
    """
    The initial interval between two consecutive probes.
    The first probe is never delayed.
    """

    backoff: float = 1.0
    """
    The multiplier of the delay after every probe (``1.0`` means a fixed delay).
    """

    max_delay: Optional[float] = None
    """
    The upper limit of the growing delays. ``None`` means unlimited.
    """

    jitter: float = 0.0
    """
    A fraction of the delay to randomly add or subtract (``0.1`` is ±10%).
    It prevents many simultaneous waiters from probing in lockstep.
    """

    timeout: float = 20 * 60
    """
    For how long a session keeps probing before it gives up.
    Measured from the session start, not from the last probe.
    """


@dataclasses.dataclass
class FileSystemSettings:

    available_delay: float = 30
    deleted_delay: float = 30
    actions_delay: float = 30

    create_timeout: float = 45 * 60
    update_timeout: float = 45 * 60
    delete_timeout: float = 30 * 60

    alias_available_timeout: float = 5 * 60
    alias_deleted_timeout: float = 5 * 60

    alias_delay: float = 0.1
    alias_backoff: float = 2.0
    alias_max_delay: float = 10
    """
    Aliases are usually quick, so they are probed often at first,
    and less often later (0.1s, 0.2s, 0.4s, and so on up to 10s).
    """


@dataclasses.dataclass
class VpnEndpointSettings:

    deleted_delay: float = 5
    deleted_timeout: float = 5 * 60


@dataclasses.dataclass
class Settings:
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
    waiting: WaitingSettings = dataclasses.field(default_factory=WaitingSettings)
    filesystems: FileSystemSettings = dataclasses.field(default_factory=FileSystemSettings)
    vpnendpoints: VpnEndpointSettings = dataclasses.field(default_factory=VpnEndpointSettings)
