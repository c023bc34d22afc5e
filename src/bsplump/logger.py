"""
Wrapper around logging to provide our own functionality.

This adds the ability to log using str.format() instead of %, and to tag messages with the
structure or lump currently being decoded.
"""
from typing import (
    TYPE_CHECKING, Any, Dict, Generator, Mapping, Optional, Tuple, Type, Union, cast,
)
from types import TracebackType
import contextlib
import contextvars
import logging
import os
import sys


__all__ = ['LoggerAdapter', 'Formatter', 'get_logger', 'init_logging', 'context', 'DEBUG_ENV']
#: Set this environment variable to ``1`` to show debug messages on the console.
DEBUG_ENV = 'BSPLUMP_DEBUG'
# Only generic in stubs!
CTX_STACK: 'contextvars.ContextVar[Tuple[str, ...]]' = contextvars.ContextVar('bsplump_logger')


class LogMessage:
    """Allow using str.format() in logging messages.

    The __str__() method performs the joining.
    """
    fmt: str
    args: Tuple[object, ...]
    kwargs: Dict[str, object]
    has_args: bool

    def __init__(
        self,
        fmt: str,
        args: Tuple[object, ...],
        kwargs: Dict[str, object],
    ) -> None:
        self.fmt = fmt
        self.args = args
        self.kwargs = kwargs
        self.has_args = bool(kwargs or args)

    def __str__(self) -> str:
        """Format the string, and indent continuation lines."""
        # Only format if we have arguments!
        # That way { or } can be used in regular messages.
        if self.has_args:
            msg = self.fmt = self.fmt.format(*self.args, **self.kwargs)
            # Don't repeat the formatting, and don't keep refs to the args.
            del self.args, self.kwargs
            self.has_args = False
        else:
            msg = self.fmt

        if '\n' not in msg:
            return msg
        lines = msg.rstrip('\n').split('\n')
        return '\n | '.join(lines) + '\n |___\n'


_SysExcInfoType = Union[
    Tuple[Type[BaseException], BaseException, Optional[TracebackType]],
    Tuple[None, None, None]
]
if TYPE_CHECKING:  # Only generic in stubs.
    _AdapterBase = logging.LoggerAdapter[logging.Logger]
else:
    _AdapterBase = logging.LoggerAdapter


class LoggerAdapter(_AdapterBase):
    """Fix loggers to use str.format(), and include the current decoding context."""
    logger: logging.Logger

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger
        logging.LoggerAdapter.__init__(self, logger, extra={})

    def log(
        self,
        level: int,
        msg: Any,
        *args: Any,
        exc_info: Union[None, bool, _SysExcInfoType, BaseException] = None,
        stack_info: bool = False,
        extra: Optional[Mapping[str, object]] = None,
        stacklevel: int = 0,
        **kwargs: Any,
    ) -> None:
        """This version of :external:py:meth:`~logging.Logger.log()` is for :external:py:meth:`str.format()` compatibility.

        The message is wrapped in a :py:class:`LogMessage` object, which is given the
        ``args`` and ``kwargs``.
        """
        if self.isEnabledFor(level):
            ctx = ', '.join(CTX_STACK.get(()))

            new_extra = {} if extra is None else dict(extra)
            new_extra['bsplump_context'] = f' ({ctx})' if ctx else ''

            # Handle some extra indirection in 3.10+
            if sys.version_info >= (3, 10):
                stacklevel += 2

            # noinspection PyProtectedMember
            self.logger._log(
                level,
                LogMessage(str(msg), args, kwargs),
                (),  # No positional arguments, we do the formatting through LogMessage.
                extra=new_extra,
                exc_info=exc_info,
                stack_info=stack_info,
                stacklevel=stacklevel,
            )

    def __getattr__(self, attr: str) -> Any:
        """Delegate unknown methods to the logger."""
        return getattr(self.logger, attr)


class Formatter(logging.Formatter):
    """Ensure records from other libraries can be formatted with our format strings."""
    def format(self, record: logging.LogRecord) -> str:
        """Ensure a default context is set in the record."""
        record.__dict__.setdefault('bsplump_context', '')
        return super().format(record)


def init_logging(
    filename: Optional['str | os.PathLike[str]'] = None,
    main_logger: str = '',
) -> logging.Logger:
    """Set up the logger and logging handlers, for use by scripts.

    The library never calls this itself. Console output goes to stdout for ``INFO`` messages
    (``DEBUG`` as well if ``BSPLUMP_DEBUG=1`` is set), and stderr for warnings and errors.

    :param filename: If this is set, all logs will be written to this file as well.
    :param main_logger: Specify the name of the logger to produce under the `bsplump` hierachy.
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Put more info in the log file, since it's not onscreen.
    long_log_format = Formatter(
        '[{levelname}]{bsplump_context} {module}.{funcName}(): {message}',
        style='{',
    )
    # Console messages, etc.
    short_log_format = Formatter(
        # One letter for level name
        '[{levelname[0]}]{bsplump_context} {module}.{funcName}(): {message}',
        style='{',
    )

    if filename is not None:
        # Make the directories the logs are in, if needed.
        os.makedirs(os.path.dirname(os.path.abspath(filename)), exist_ok=True)
        log_handler = logging.FileHandler(filename, mode='w', encoding='utf8')
        log_handler.setLevel(logging.DEBUG)
        log_handler.setFormatter(long_log_format)
        logger.addHandler(log_handler)

    if sys.stdout is not None:
        stdout_loghandler = logging.StreamHandler(sys.stdout)
        stdout_loghandler.setLevel(
            logging.DEBUG
            if os.environ.get(DEBUG_ENV, '0') == '1' else
            logging.INFO
        )
        stdout_loghandler.setFormatter(short_log_format)

        def ignore_warnings(record: logging.LogRecord) -> bool:
            """Filter out messages higher than WARNING.

            Those are handled by stderr, and we don't want duplicates.
            """
            return record.levelno < logging.WARNING
        stdout_loghandler.addFilter(ignore_warnings)
        logger.addHandler(stdout_loghandler)

    if sys.stderr is not None:
        stderr_loghandler = logging.StreamHandler(sys.stderr)
        stderr_loghandler.setLevel(logging.WARNING)
        stderr_loghandler.setFormatter(short_log_format)
        logger.addHandler(stderr_loghandler)

    if main_logger:
        return get_logger(main_logger)
    else:
        return cast(logging.Logger, LoggerAdapter(logger))


def get_logger(name: str = '') -> logging.Logger:
    """Get the named logger object.

    This puts the logger into the ``bsplump`` namespace, and wraps it to
    use :external:py:meth:`str.format()` instead of ``%`` formatting.
    Module names which are already inside the package are not prefixed twice.
    """
    if not name:  # Allow retrieving the main logger.
        log = logging.getLogger('bsplump')
    elif name == 'bsplump' or name.startswith('bsplump.'):
        log = logging.getLogger(name)
    else:
        log = logging.getLogger('bsplump.' + name)
    return cast(logging.Logger, LoggerAdapter(log))


@contextlib.contextmanager
def context(name: str) -> Generator[str, None, None]:
    """Context manager to allow specifying additional information for any logs contained in this block.

    The specified string gets included in the log messages.
    """
    token = CTX_STACK.set(CTX_STACK.get(()) + (name, ))
    try:
        yield name
    finally:
        CTX_STACK.reset(token)
