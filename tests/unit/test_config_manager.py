import json

import pytest

from seq2seq_gen.utils.config_manager import (
    ConfigurationError,
    DebugConfig,
    GenerationConfig,
    LoggingConfig,
    ModelConfig,
    Seq2SeqConfig,
)


class TestSeq2SeqConfig:
    """Test suite for the configuration manager."""

    def test_defaults(self):
        config = Seq2SeqConfig()
        assert config.generation.max_length == 100
        assert config.generation.top_k == 0
        assert config.generation.seed is None
        assert config.model.start_token_id == 0
        assert config.model.end_token_id == 1

    def test_from_env(self):
        config = Seq2SeqConfig.from_env({
            "SEQ2SEQ_GENERATION_MAX_LENGTH": "50",
            "SEQ2SEQ_GENERATION_TOP_K": "8",
            "SEQ2SEQ_GENERATION_SEED": "42",
            "SEQ2SEQ_MODEL_END_TOKEN_ID": "2",
            "SEQ2SEQ_MODEL_DEVICE": "cuda:1",
            "SEQ2SEQ_LOGGING_LOG_LEVEL": "debug",
            "SEQ2SEQ_LOGGING_CONSOLE_LOGGING": "false",
            "UNRELATED": "ignored",
        })

        assert config.generation.max_length == 50
        assert config.generation.top_k == 8
        assert config.generation.seed == 42
        assert config.model.end_token_id == 2
        assert config.model.device == "cuda:1"
        assert config.logging.log_level == "DEBUG"
        assert config.logging.console_logging is False

    def test_from_env_debug_switches(self):
        config = Seq2SeqConfig.from_env({
            "SEQ2SEQ_DEBUG": "yes",
            "SEQ2SEQ_DEBUG_GENERATION_ENGINE": "0",
        })
        assert config.debug.global_debug is True
        assert config.debug.module_debug == {"generation_engine": False}

    @pytest.mark.parametrize(
        "environ",
        [
            {"SEQ2SEQ_GENERATION_MAX_LENGTH": "many"},
            {"SEQ2SEQ_GENERATION_MAX_LENGTH": "0"},
            {"SEQ2SEQ_GENERATION_TOP_K": "-3"},
            {"SEQ2SEQ_MODEL_DEVICE": "tpu"},
            {"SEQ2SEQ_LOGGING_LOG_LEVEL": "LOUD"},
        ],
    )
    def test_from_env_invalid(self, environ):
        with pytest.raises(ConfigurationError):
            Seq2SeqConfig.from_env(environ)

    def test_file_round_trip(self, tmp_path):
        config = Seq2SeqConfig(
            generation=GenerationConfig(max_length=12, top_k=3, seed=7),
            model=ModelConfig(model_id="t5-small", start_token_id=0, end_token_id=1),
        )
        path = tmp_path / "nested" / "config.json"

        config.save_to_file(path)
        loaded = Seq2SeqConfig.from_file(path)

        assert loaded.to_dict() == config.to_dict()
        assert json.loads(path.read_text())["generation"]["top_k"] == 3

    def test_from_file_ignores_unknown_keys(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"generation": {"max_length": 5, "beams": 4}, "server": {}}))

        config = Seq2SeqConfig.from_file(path)

        assert config.generation.max_length == 5
        assert not hasattr(config.generation, "beams")

    def test_from_file_errors(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            Seq2SeqConfig.from_file(tmp_path / "missing.json")

        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            Seq2SeqConfig.from_file(bad)

        invalid = tmp_path / "invalid.json"
        invalid.write_text(json.dumps({"generation": {"max_length": 0}}))
        with pytest.raises(ConfigurationError):
            Seq2SeqConfig.from_file(invalid)

    @pytest.mark.parametrize(
        "data",
        [
            {"generation": {"max_length": "50"}},
            {"generation": {"top_k": 2.5}},
            {"generation": {"seed": "7"}},
            {"model": {"start_token_id": "0"}},
            {"model": {"device": 3}},
            {"logging": {"log_level": 10}},
        ],
    )
    def test_from_file_wrong_types(self, tmp_path, data):
        """Test that mistyped values surface as configuration errors."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps(data))

        with pytest.raises(ConfigurationError):
            Seq2SeqConfig.from_file(path)

    def test_from_env_numeric_model_id_stays_string(self):
        config = Seq2SeqConfig.from_env({
            "SEQ2SEQ_MODEL_MODEL_ID": "12345",
            "SEQ2SEQ_GENERATION_SEED": "9",
        })
        assert config.model.model_id == "12345"
        assert config.generation.seed == 9

    def test_from_env_invalid_seed(self):
        with pytest.raises(ConfigurationError):
            Seq2SeqConfig.from_env({"SEQ2SEQ_GENERATION_SEED": "abc"})


class TestSectionValidation:
    def test_logging_level_normalized(self):
        assert LoggingConfig(log_level="warning").log_level == "WARNING"

    def test_negative_token_ids(self):
        with pytest.raises(ConfigurationError):
            ModelConfig(start_token_id=-1)
        with pytest.raises(ConfigurationError):
            ModelConfig(end_token_id=-1)


class TestDebugConfig:
    """Test suite for per-module debug switches."""

    def test_precedence(self, monkeypatch):
        debug = DebugConfig(global_debug=True, module_debug={"samplers": False})
        monkeypatch.delenv("SEQ2SEQ_DEBUG_SAMPLERS", raising=False)
        monkeypatch.delenv("SEQ2SEQ_DEBUG_TORCH_EXECUTOR", raising=False)

        assert debug.is_debug_enabled("samplers") is False
        assert debug.is_debug_enabled("torch_executor") is True

        monkeypatch.setenv("SEQ2SEQ_DEBUG_SAMPLERS", "true")
        assert debug.is_debug_enabled("samplers") is True
