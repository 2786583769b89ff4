import pytest
from pydantic import ValidationError

from solitaire.logic.enums import CardSize
from solitaire.logic.exceptions import GameRuleError, UnsupportedSettingsError
from solitaire.logic.settings import GameSettings, Preferences, validate_settings
from solitaire.runtime.settings import EngineSettings


class TestGameSettings:
    def test_default_scoring(self):
        settings = GameSettings()

        assert settings.waste_to_foundation_points == 10
        assert settings.waste_to_tableau_points == 5
        assert settings.tableau_to_foundation_points == 10
        assert settings.reveal_card_points == 5
        assert settings.foundation_to_tableau_points == -15
        assert settings.allow_foundation_to_tableau

    def test_defaults_validate(self):
        validate_settings(GameSettings())

    @pytest.mark.parametrize("capacity", [19, 51])
    def test_history_capacity_out_of_range(self, capacity):
        with pytest.raises(UnsupportedSettingsError, match="history_capacity"):
            validate_settings(GameSettings(history_capacity=capacity))

    def test_unsupported_settings_is_a_rule_error(self):
        assert issubclass(UnsupportedSettingsError, GameRuleError)


class TestPreferences:
    def test_defaults(self):
        prefs = Preferences()
        assert (prefs.draw_count, prefs.sound, prefs.animations, prefs.card_size) == (3, True, True, CardSize.NORMAL)

    def test_rejects_draw_two(self):
        with pytest.raises(ValidationError, match="draw_count"):
            Preferences(draw_count=2)


class TestEngineSettings:
    def test_defaults(self, monkeypatch):
        for name in ("DATA_DIR", "LOG_DIR", "HISTORY_CAPACITY", "AUTOSAVE_INTERVAL_SECONDS"):
            monkeypatch.delenv(f"SOLITAIRE_{name}", raising=False)
        settings = EngineSettings()

        assert settings.history_capacity == 50
        assert settings.autosave_interval_seconds == 5
        assert settings.log_dir is None

    def test_reads_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("SOLITAIRE_HISTORY_CAPACITY", "20")
        monkeypatch.setenv("SOLITAIRE_ALLOW_FOUNDATION_TO_TABLEAU", "false")
        monkeypatch.setenv("SOLITAIRE_DATA_DIR", "/tmp/solitaire")

        settings = EngineSettings()

        assert settings.history_capacity == 20
        assert not settings.allow_foundation_to_tableau
        assert settings.data_dir == "/tmp/solitaire"

    def test_rejects_capacity_outside_range(self, monkeypatch):
        monkeypatch.setenv("SOLITAIRE_HISTORY_CAPACITY", "100")
        with pytest.raises(ValidationError):
            EngineSettings()
