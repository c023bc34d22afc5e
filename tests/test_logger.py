"""Test the logging system."""
from logging import Logger, getLogger as stdlib_getlogger
import logging

import pytest


def function(logger: Logger) -> None:
    """Test detecting different methods."""
    logger.info('Starting other function')
    logger.warning('Used wrong logic')
    logger.info('Finishing.')


@pytest.fixture
def clean_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """init_logging() adds handlers to the root logger, ensure we undo that."""
    root = stdlib_getlogger()
    monkeypatch.setattr(root, 'handlers', [])
    monkeypatch.setattr(root, 'level', root.level)


def test_logging_output(capsys: pytest.CaptureFixture[str], clean_root: None, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test the output of logging to the console."""
    from bsplump.logger import context, get_logger, init_logging
    monkeypatch.delenv('BSPLUMP_DEBUG', raising=False)

    root = init_logging()
    root.info('hello there')
    root.error('Root error!:\n- Something failed.')
    get_logger('another').warning('A problem: {}', 45)
    root.debug('Not shown')
    function(root)
    with context('First'):
        root.info('Message')
        with context('Second'):
            root.info('More messages')
        root.warning('A warning.')

    out, err = capsys.readouterr()
    assert out.splitlines() == [
        '[I] test_logger.test_logging_output(): hello there',
        '[I] test_logger.function(): Starting other function',
        '[I] test_logger.function(): Finishing.',
        '[I] (First) test_logger.test_logging_output(): Message',
        '[I] (First, Second) test_logger.test_logging_output(): More messages',
    ]
    assert err.splitlines() == [
        '[E] test_logger.test_logging_output(): Root error!:',
        ' | - Something failed.',
        ' |___',
        '',
        '[W] test_logger.test_logging_output(): A problem: 45',
        '[W] test_logger.function(): Used wrong logic',
        '[W] (First) test_logger.test_logging_output(): A warning.',
    ]


def test_debug_env(capsys: pytest.CaptureFixture[str], clean_root: None, monkeypatch: pytest.MonkeyPatch) -> None:
    """Setting the environment variable shows debug messages."""
    from bsplump.logger import init_logging
    monkeypatch.setenv('BSPLUMP_DEBUG', '1')

    root = init_logging()
    root.debug('Debugging {}', 'things')
    out, err = capsys.readouterr()
    assert out == '[D] test_logger.test_debug_env(): Debugging things\n'
    assert err == ''


def test_log_file(tmp_path, clean_root: None) -> None:
    """Logs are also written to a file if specified, including debug messages."""
    from bsplump.logger import init_logging

    filename = tmp_path / 'logs' / 'decode.log'
    log = init_logging(filename, 'filetest')
    log.debug('Wrote {count} records', count=12)
    for handler in stdlib_getlogger().handlers:
        handler.flush()
        if isinstance(handler, logging.FileHandler):
            handler.close()
    assert filename.read_text('utf8') == '[DEBUG] test_logger.test_log_file(): Wrote 12 records\n'


def test_get_logger_names() -> None:
    """Loggers are placed in the package namespace, without doubling up."""
    from bsplump.logger import get_logger

    assert get_logger().name == 'bsplump'
    assert get_logger('other').name == 'bsplump.other'
    assert get_logger('bsplump.lump').name == 'bsplump.lump'


def test_braces_without_args(caplog: pytest.LogCaptureFixture) -> None:
    """Messages without arguments are not formatted, so braces are kept."""
    from bsplump.logger import get_logger

    caplog.set_level(logging.INFO, logger='bsplump')
    get_logger('braces').info('A {literal} message')
    assert caplog.records[-1].getMessage() == 'A {literal} message'
