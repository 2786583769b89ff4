import structlog

from shared.logging import setup_logging
from shared.storage import BlobStorage, LocalBlobStorage
from solitaire.logic.engine import SolitaireEngine
from solitaire.logic.settings import GameSettings
from solitaire.persistence.repository import GameRepository
from solitaire.runtime.settings import EngineSettings

logger = structlog.get_logger()


def create_engine(
    settings: EngineSettings | None = None,
    *,
    store: BlobStorage | None = None,
) -> SolitaireEngine:
    """
    Wire logging, storage and the repository into a ready engine.

    When store is omitted, blobs are kept under settings.data_dir. The
    returned engine has no game yet; call load() or init().
    """
    if settings is None:
        settings = EngineSettings()

    setup_logging(settings.log_dir)

    if store is None:
        store = LocalBlobStorage(settings.data_dir)

    engine = SolitaireEngine(
        GameRepository(store),
        settings=GameSettings(
            history_capacity=settings.history_capacity,
            allow_foundation_to_tableau=settings.allow_foundation_to_tableau,
        ),
        autosave_interval_seconds=settings.autosave_interval_seconds,
    )
    logger.info("solitaire engine ready", history_capacity=settings.history_capacity)
    return engine
