import logging

import pytest

from typedcad.location import Location
from typedcad.logging_config import setup_logging
from typedcad.primitives import cylinder
from typedcad.units import mm


@pytest.fixture
def package_logger():
    logger = logging.getLogger('typedcad')
    saved = (logger.level, list(logger.handlers))
    yield logger
    logger.setLevel(saved[0])
    logger.handlers[:] = saved[1]


def test_setup_logging_console(package_logger):
    logger = setup_logging(logging.DEBUG)
    assert logger is package_logger
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_setup_logging_twice_does_not_duplicate(package_logger):
    setup_logging()
    setup_logging()
    assert len(package_logger.handlers) == 1


def test_setup_logging_file(package_logger, tmp_path):
    log_file = tmp_path / 'typedcad.log'
    setup_logging(logging.DEBUG, log_file=str(log_file))
    assert len(package_logger.handlers) == 2

    cylinder(Location(), mm(1), mm(1)).generate_mesh()
    for h in package_logger.handlers:
        h.flush()
    text = log_file.read_text(encoding='utf-8')
    assert 'typedcad.primitives' in text
    assert '120 facets' in text
    for h in package_logger.handlers:
        h.close()


def test_debug_records(caplog):
    with caplog.at_level(logging.DEBUG, logger='typedcad'):
        cylinder(Location(), mm(1), mm(1)).generate_mesh()
    assert any('facets' in r.getMessage() for r in caplog.records)
