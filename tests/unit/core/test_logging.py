"""
Tests for structured logging setup.
"""

import json
import logging

import pytest
import structlog

from waypoint_sampler.core.logging import configure_logging, get_logger, waypoint_context


@pytest.fixture
def log_file(temp_dir):
    path = temp_dir / "sampler.log"
    yield path
    for handler in list(logging.root.handlers):
        logging.root.removeHandler(handler)
        handler.close()
    structlog.reset_defaults()


def read_events(path):
    for handler in logging.root.handlers:
        handler.flush()
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


def test_json_events_carry_waypoint_context(log_file):
    configure_logging(level="DEBUG", json_output=True, log_file=str(log_file))
    logger = get_logger("waypoint_sampler.test")

    with waypoint_context(waypoint=3):
        logger.debug("waypoint_sampled", returned=2)
    logger.debug("after_context")

    first, second = read_events(log_file)
    assert first["event"] == "waypoint_sampled"
    assert first["waypoint"] == 3
    assert first["returned"] == 2
    assert first["level"] == "debug"
    assert first["logger"] == "waypoint_sampler.test"
    assert "waypoint" not in second


def test_level_filters_debug(log_file):
    configure_logging(level="WARNING", json_output=True, log_file=str(log_file))
    logger = get_logger("waypoint_sampler.test")

    logger.debug("waypoint_sampled")
    logger.warning("waypoints_without_states", count=1)

    events = read_events(log_file)
    assert [e["event"] for e in events] == ["waypoints_without_states"]
