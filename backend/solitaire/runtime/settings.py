"""Engine runtime configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings

from solitaire.logic.engine import DEFAULT_AUTOSAVE_INTERVAL_SECONDS
from solitaire.logic.settings import MAX_HISTORY_CAPACITY, MIN_HISTORY_CAPACITY


class EngineSettings(BaseSettings):
    model_config = {"env_prefix": "SOLITAIRE_"}

    data_dir: str = Field(default="backend/data/solitaire", min_length=1)
    log_dir: str | None = None
    history_capacity: int = Field(default=MAX_HISTORY_CAPACITY, ge=MIN_HISTORY_CAPACITY, le=MAX_HISTORY_CAPACITY)
    autosave_interval_seconds: int = Field(default=DEFAULT_AUTOSAVE_INTERVAL_SECONDS, ge=1)
    allow_foundation_to_tableau: bool = True
