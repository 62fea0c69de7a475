"""
Status probes: one fetch-and-classify cycle against the remote API.

A probe wraps a lookup (a "finder"), and translates its results and errors
into a :class:`states.Reading`, which is then interpreted by the waiters:

* The absence of the resource is a regular reading with ``NOT_FOUND`` label.
  It is not an error: e.g., it is the desired state when awaiting a deletion.
* All other lookup errors are readings with ``UNKNOWN`` label and the error.
  The waiters stop polling on them and escalate the errors to the callers.
* A found resource is classified by a domain-specific state getter.

The state getters and the locators of nested elements are pure functions
supplied by the domain kits: they are not awaited and must not do any I/O.

Some probes look deeper into the resource: e.g., for an alias in a list
of aliases of a file system, or for an administrative action of some type
in a list of actions. Their readings still carry the parent resource
as the snapshot, while the label is the state of the nested element.
"""
import collections.abc
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar

from settle._cogs.clients import errors
from settle._cogs.structs import states

_SnapshotT = TypeVar('_SnapshotT')
_ElementT = TypeVar('_ElementT')

Finder = Callable[[], Awaitable[_SnapshotT]]
StateGetter = Callable[[_SnapshotT], Optional[states.StateLabel]]
Locator = Callable[[_SnapshotT], Optional[_ElementT]]


def status_probe(
        finder: Finder[_SnapshotT],
        get_state: StateGetter[_SnapshotT],
) -> states.Probe[_SnapshotT]:
    """
    Classify the resource by its own state field (e.g. a lifecycle).
    """
    async def probe() -> states.Reading[_SnapshotT]:
        try:
            snapshot = await finder()
        except errors.NotFoundError:
            return states.Reading(None, states.NOT_FOUND)
        except Exception as e:
            return states.Reading(None, states.UNKNOWN, e)
        label = get_state(snapshot)
        return states.Reading(snapshot, label if label is not None else states.UNKNOWN)
    return probe


def nested_status_probe(
        finder: Finder[_SnapshotT],
        locate: Locator[_SnapshotT, _ElementT],
        get_state: StateGetter[_ElementT],
) -> states.Probe[_SnapshotT]:
    """
    Classify the resource by a state of a nested element (e.g. of an alias).

    If the nested element is absent, it is an ``ELEMENT_NOT_FOUND`` reading,
    and the parent resource is still reported as the snapshot. The absence
    of the parent itself is a ``NOT_FOUND`` reading, as for other probes.
    """
    async def probe() -> states.Reading[_SnapshotT]:
        try:
            snapshot = await finder()
        except errors.NotFoundError:
            return states.Reading(None, states.NOT_FOUND)
        except Exception as e:
            return states.Reading(None, states.UNKNOWN, e)
        element = locate(snapshot)
        if element is None:
            return states.Reading(snapshot, states.ELEMENT_NOT_FOUND)
        label = get_state(element)
        return states.Reading(snapshot, label if label is not None else states.UNKNOWN)
    return probe


def first_match(
        get_elements: Callable[[_SnapshotT], Optional[Iterable[_ElementT]]],
        predicate: Callable[[_ElementT], bool],
) -> Locator[_SnapshotT, _ElementT]:
    """
    Locate the first nested element matching the criteria; skip the empty ones.
    """
    def locate(snapshot: _SnapshotT) -> Optional[_ElementT]:
        for element in get_elements(snapshot) or []:
            if element is not None and predicate(element):
                return element
        return None
    return locate


def action_status_probe(
        finder: Finder[_SnapshotT],
        locate: Locator[_SnapshotT, _ElementT],
        get_state: StateGetter[_ElementT],
        *,
        treat_no_match_as: states.StateLabel,
) -> states.Probe[_SnapshotT]:
    """
    Classify the resource by its in-flight action of a specific type, if any.

    Unlike for other nested elements, the absence of a matching action is not
    a ``NOT_FOUND`` reading: no in-flight action means that it has completed.
    Which state it implies exactly is up to the caller (usually "completed").
    """
    async def probe() -> states.Reading[_SnapshotT]:
        try:
            snapshot = await finder()
        except errors.NotFoundError:
            return states.Reading(None, states.NOT_FOUND)
        except Exception as e:
            return states.Reading(None, states.UNKNOWN, e)
        action = locate(snapshot)
        if action is None:
            return states.Reading(snapshot, treat_no_match_as)
        label = get_state(action)
        return states.Reading(snapshot, label if label is not None else states.UNKNOWN)
    return probe


def dig(record: Any, path: str) -> Any:
    """
    Get a value by a dotted path from nested mappings, or ``None`` if absent.

    E.g. ``dig(record, 'Status.Code')`` for ``{'Status': {'Code': 'available'}}``.
    """
    value = record
    for key in path.split('.'):
        if not isinstance(value, collections.abc.Mapping) or key not in value:
            return None
        value = value[key]
    return value
