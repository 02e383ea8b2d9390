import io
import logging

import pytest

from gitflow_version.cli.utils.logging import reset_logging

from .factories import make_package_json, make_pom


@pytest.fixture(autouse=True)
def _reset_cli_logging():
    yield
    reset_logging()


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("gitflow_version")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream  # Yield the stream to the test function

    # Cleanup after the test
    logger.removeHandler(handler)
    log_stream.close()


@pytest.fixture
def write_pom(tmp_path):
    def _write(revision: str, name: str = "pom.xml"):
        path = tmp_path / name
        path.write_text(make_pom(revision))
        return path

    return _write


@pytest.fixture
def write_package_json(tmp_path):
    def _write(version: str, name: str = "package.json"):
        path = tmp_path / name
        path.write_text(make_package_json(version))
        return path

    return _write
