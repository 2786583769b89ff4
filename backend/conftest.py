"""Root conftest: load test environment variables and route structlog through stdlib so caplog sees engine logs."""

from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv

from shared.logging import _serialize_enums, _shorten_seed
from shared.storage import MemoryBlobStorage

load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

# Same processor chain as setup_logging, minus the handlers it installs.
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        _serialize_enums,
        _shorten_seed,
        structlog.processors.StackInfoRenderer(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=False,
)


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Keep a bound game_seed from leaking into the next test."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def memory_store() -> MemoryBlobStorage:
    return MemoryBlobStorage()
