"""
Per-resource logging: the resource references in the log records & formatting.

The waiters and the kits log via the loggers given to them explicitly.
When a kit is not given a logger, it makes a :class:`ResourceLogger` for the
resource it waits for, so that the messages can be attributed to the resources
in the logs: either prefixed in the text logs, or as a field in the JSON logs.
"""
import copy
import enum
import logging
from typing import TYPE_CHECKING, Any, MutableMapping, Optional, TextIO, Tuple, Union

try:
    # python-json-logger>=3.1.0
    from pythonjsonlogger.core import RESERVED_ATTRS as _pjl_RESERVED_ATTRS
    from pythonjsonlogger.json import JsonFormatter as _pjl_JsonFormatter
except ImportError:
    # python-json-logger<3.1.0
    from pythonjsonlogger.jsonlogger import JsonFormatter as _pjl_JsonFormatter  # type: ignore
    from pythonjsonlogger.jsonlogger import RESERVED_ATTRS as _pjl_RESERVED_ATTRS  # type: ignore

from settle._cogs.helpers import typedefs

logger = logging.getLogger('settle.resources')

# A key for resource references in JSON logs, as seen by the log parsers.
DEFAULT_JSON_REFKEY = 'resource'


class LogFormat(enum.Enum):
    """ Log formats, as specified on CLI. """
    PLAIN = '%(message)s'
    FULL = '[%(asctime)s] %(name)-20.20s [%(levelname)-8.8s] %(message)s'
    JSON = '-json-'  # not used for formatting, only for detection


class ResourceFormatter(logging.Formatter):
    pass


class ResourceTextFormatter(ResourceFormatter, logging.Formatter):
    pass


class ResourceJsonFormatter(ResourceFormatter, _pjl_JsonFormatter):
    def __init__(
            self,
            *args: Any,
            refkey: Optional[str] = None,
            **kwargs: Any,
    ) -> None:
        # Avoid type checking, as the args are not in the parent consructor.
        reserved_attrs = kwargs.pop('reserved_attrs', _pjl_RESERVED_ATTRS)
        reserved_attrs = set(reserved_attrs)
        reserved_attrs |= {'resource_ref'}
        kwargs.update(reserved_attrs=reserved_attrs)
        kwargs.setdefault('timestamp', True)
        super().__init__(*args, **kwargs)
        self._refkey: str = refkey or DEFAULT_JSON_REFKEY

    def add_fields(
            self,
            log_record: Any,
            record: logging.LogRecord,
            message_dict: Any,
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        if self._refkey and hasattr(record, 'resource_ref'):
            log_record[self._refkey] = getattr(record, 'resource_ref')

        if 'severity' not in log_record:
            log_record['severity'] = (
                "debug" if record.levelno <= logging.DEBUG else
                "info" if record.levelno <= logging.INFO else
                "warn" if record.levelno <= logging.WARNING else
                "error" if record.levelno <= logging.ERROR else
                "fatal")


class ResourcePrefixingMixin(ResourceFormatter):
    def format(self, record: logging.LogRecord) -> str:
        if hasattr(record, 'resource_ref'):
            ref = getattr(record, 'resource_ref')
            kind = ref.get('kind') or ''
            id = ref.get('id') or ''
            prefix = f"[{kind}/{id}]" if kind else f"[{id}]"
            record = copy.copy(record)  # shallow
            record.msg = f"{prefix} {record.msg}"
        return super().format(record)


class ResourcePrefixingTextFormatter(ResourcePrefixingMixin, ResourceTextFormatter):
    pass


class ResourcePrefixingJsonFormatter(ResourcePrefixingMixin, ResourceJsonFormatter):
    pass


class ResourceLogger(typedefs.LoggerAdapter):
    """
    A logger/adapter to carry the resource identifiers for formatting.

    Constructed for every waited resource individually (unless the caller
    provides its own logger). The nested elements, such as aliases, are
    referred to as sub-kinds of their parents: e.g. ``file-system/alias``.
    """

    def __init__(
            self,
            *,
            kind: str,
            id: str,
            parent: Optional[str] = None,
    ) -> None:
        ref = dict(kind=kind, id=id)
        if parent is not None:
            ref.update(parent=parent)
        super().__init__(logger, dict(resource_ref=ref))

    def process(
            self,
            msg: str,
            kwargs: MutableMapping[str, Any],
    ) -> Tuple[str, MutableMapping[str, Any]]:
        # Native logging overwrites the message's extra with the adapter's extra.
        # We merge them, so that both message's & adapter's extras are available.
        kwargs["extra"] = dict(self.extra or {}, **kwargs.get('extra', {}))
        return msg, kwargs


# Used to identify and remove our own handlers on re-runs (e.g. in CLI tests).
if TYPE_CHECKING:
    class _SettleStreamHandler(logging.StreamHandler[TextIO]):
        pass
else:
    class _SettleStreamHandler(logging.StreamHandler):
        pass


def configure(
        debug: Optional[bool] = None,
        verbose: Optional[bool] = None,
        quiet: Optional[bool] = None,
        log_format: Union[LogFormat, str] = LogFormat.FULL,
        log_prefix: Optional[bool] = False,
        log_refkey: Optional[str] = None,
) -> None:
    log_level = 'DEBUG' if debug or verbose else 'WARNING' if quiet else 'INFO'
    formatter = make_formatter(log_format=log_format, log_prefix=log_prefix, log_refkey=log_refkey)
    handler = _SettleStreamHandler()
    handler.setFormatter(formatter)
    logger = logging.getLogger()
    logger.handlers[:] = [h for h in logger.handlers if not isinstance(h, _SettleStreamHandler)]
    logger.addHandler(handler)
    logger.setLevel(log_level)

    # Prevent the low-level logging unless in the debug mode. Keep only our own messages.
    # For no-propagation loggers, add a dummy null handler to prevent printing the messages.
    for name in ['asyncio']:
        logger = logging.getLogger(name)
        logger.propagate = bool(debug)
        if not debug:
            logger.handlers[:] = [logging.NullHandler()]


def make_formatter(
        log_format: Union[LogFormat, str] = LogFormat.FULL,
        log_prefix: Optional[bool] = False,
        log_refkey: Optional[str] = None,
) -> ResourceFormatter:
    log_prefix = log_prefix if log_prefix is not None else bool(log_format is not LogFormat.JSON)
    if log_format is LogFormat.JSON:
        if log_prefix:
            return ResourcePrefixingJsonFormatter(refkey=log_refkey)
        else:
            return ResourceJsonFormatter(refkey=log_refkey)
    elif isinstance(log_format, (LogFormat, str)):
        fmt = log_format.value if isinstance(log_format, LogFormat) else log_format
        if log_prefix:
            return ResourcePrefixingTextFormatter(fmt)
        else:
            return ResourceTextFormatter(fmt)
    else:
        raise ValueError(f"Unsupported log format: {log_format!r}")
