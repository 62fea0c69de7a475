"""
State labels, probe readings, and specifications of the waiting sessions.

A *reading* is the result of one probe: a snapshot of the resource as fetched,
a state label classifying it, and an error if the state could not be known.

A *wait spec* is an immutable configuration of one waiting session:
which states keep the session polling, which ones end it successfully,
how long to poll, and how often.
"""
import dataclasses
from typing import AbstractSet, Awaitable, Callable, Generic, Optional, TypeVar

_SnapshotT = TypeVar('_SnapshotT')

StateLabel = str

# Pseudo-states: used when a probe cannot classify the resource by its own fields.
NOT_FOUND: StateLabel = 'NotFound'
UNKNOWN: StateLabel = 'Unknown'

# The parent resource exists, but its nested element (e.g. an alias) is not in it.
ELEMENT_NOT_FOUND: StateLabel = 'ElementNotFound'


@dataclasses.dataclass(frozen=True)
class Reading(Generic[_SnapshotT]):
    """
    An outcome of a single probe.

    The snapshot is ``None`` if the resource is absent or was not fetched.
    The error is set only for the failed probes, together with ``UNKNOWN``.
    Absence is not an error: it is a regular reading with ``NOT_FOUND``.
    """
    snapshot: Optional[_SnapshotT]
    label: StateLabel
    error: Optional[Exception] = None


Probe = Callable[[], Awaitable[Reading[_SnapshotT]]]


@dataclasses.dataclass(frozen=True)
class WaitSpec:
    """
    How one waiting session decides to continue, to succeed, or to fail.

    An empty target means that the only way to succeed is the disappearance
    of the resource (i.e. the ``NOT_FOUND`` reading), as with deletions.
    This policy can be stated explicitly via ``absence_is_success``;
    if not stated, it is enabled for empty targets only.
    """
    pending: AbstractSet[StateLabel]
    target: AbstractSet[StateLabel]
    timeout: float
    delay: float
    backoff: float = 1.0
    max_delay: Optional[float] = None
    jitter: float = 0.0
    absence_is_success: Optional[bool] = None
    not_found_checks: int = 0
    continuous_target_occurrence: int = 1
    what: str = 'resource'

    def __post_init__(self) -> None:
        # Normalise any given collections (lists, tuples) into hashable immutable sets.
        object.__setattr__(self, 'pending', frozenset(self.pending))
        object.__setattr__(self, 'target', frozenset(self.target))
        if self.absence_is_success is None:
            object.__setattr__(self, 'absence_is_success', not self.target)

        overlap = self.pending & self.target
        if overlap:
            raise ValueError(f"States cannot be both pending and target: {sorted(overlap)!r}")
        if self.absence_is_success and NOT_FOUND in self.pending:
            raise ValueError(f"{NOT_FOUND!r} cannot be pending when the absence is a success.")
        if self.timeout < 0 or self.delay < 0:
            raise ValueError("Timeouts and delays cannot be negative.")
        if self.backoff < 1.0:
            raise ValueError(f"The backoff must be 1.0 or above, got {self.backoff!r}.")
        if not 0.0 <= self.jitter < 1.0:
            raise ValueError(f"The jitter must be a fraction in [0, 1), got {self.jitter!r}.")
        if self.continuous_target_occurrence < 1:
            raise ValueError("At least one target occurrence is needed to succeed.")
        if self.not_found_checks < 0:
            raise ValueError("The number of not-found checks cannot be negative.")

    def is_success(self, label: StateLabel) -> bool:
        return label in self.target or (label == NOT_FOUND and bool(self.absence_is_success))

    def is_pending(self, label: StateLabel) -> bool:
        return label in self.pending
