"""Tests for the configuration system and whitespace modes."""

import json

import pytest

from xml_path_rules.shared.config import (
    ConfigError,
    ConfigValidationError,
    DispatchConfig,
    WhitespaceMode,
)

SAMPLE = "  a   b  "


class TestWhitespaceMode:
    """Test suite for WhitespaceMode normalization."""

    @pytest.mark.parametrize(
        "mode, expected",
        [
            (WhitespaceMode.NORMALIZE, "a b"),
            (WhitespaceMode.TRIM, "a   b"),
            (WhitespaceMode.COLLAPSE, " a b "),
            (WhitespaceMode.KEEP, "  a   b  "),
        ],
    )
    def test_apply(self, mode: WhitespaceMode, expected: str) -> None:
        """Test each mode on text with inner and outer whitespace runs."""
        assert mode.apply(SAMPLE) == expected

    def test_collapse_handles_newlines_and_tabs(self) -> None:
        assert WhitespaceMode.COLLAPSE.apply("a\n\t b") == "a b"

    def test_whitespace_only_text_normalizes_to_empty(self) -> None:
        assert WhitespaceMode.NORMALIZE.apply(" \n\t ") == ""
        assert WhitespaceMode.TRIM.apply(" \n ") == ""
        assert WhitespaceMode.COLLAPSE.apply(" \n ") == " "

    def test_trim_respects_edges(self) -> None:
        """Test that interior segments keep their boundary spaces."""
        assert WhitespaceMode.NORMALIZE.apply(" a  b ", leading=False, trailing=False) == " a b "
        assert WhitespaceMode.NORMALIZE.apply(" a  b ", leading=True, trailing=False) == "a b "
        assert WhitespaceMode.TRIM.apply(" a  b ", leading=False, trailing=True) == " a  b"

    def test_whitespace_only_interior_segment_is_dropped_when_trimming(self) -> None:
        assert WhitespaceMode.NORMALIZE.apply("\n  ", leading=False, trailing=False) == ""
        assert WhitespaceMode.COLLAPSE.apply("\n  ", leading=False, trailing=False) == " "

    def test_combine_prefers_most_aggressive(self) -> None:
        """Test that combining modes never loses requested normalization."""
        assert WhitespaceMode.KEEP.combine(WhitespaceMode.TRIM) is WhitespaceMode.TRIM
        assert WhitespaceMode.COLLAPSE.combine(WhitespaceMode.KEEP) is WhitespaceMode.COLLAPSE
        assert WhitespaceMode.TRIM.combine(WhitespaceMode.NORMALIZE) is WhitespaceMode.NORMALIZE
        assert WhitespaceMode.KEEP.combine(WhitespaceMode.KEEP) is WhitespaceMode.KEEP

    def test_trim_and_collapse_combine_to_normalize(self) -> None:
        combined = WhitespaceMode.TRIM.combine(WhitespaceMode.COLLAPSE)
        assert combined is WhitespaceMode.NORMALIZE

    def test_coerce_accepts_strings(self) -> None:
        assert WhitespaceMode.coerce("trim") is WhitespaceMode.TRIM
        assert WhitespaceMode.coerce(" Collapse ") is WhitespaceMode.COLLAPSE
        assert WhitespaceMode.coerce(WhitespaceMode.KEEP) is WhitespaceMode.KEEP

    def test_coerce_rejects_unknown_values(self) -> None:
        with pytest.raises(ValueError, match="whitespace mode must be one of"):
            WhitespaceMode.coerce("squash")
        with pytest.raises(ValueError):
            WhitespaceMode.coerce(3)


class TestDispatchConfig:
    """Test suite for DispatchConfig."""

    def test_default_configuration(self) -> None:
        config = DispatchConfig()

        assert config.default_whitespace is WhitespaceMode.NORMALIZE
        assert config.strip_namespaces is True
        assert config.chunk_size == 64 * 1024
        assert config.resolve_entities is False
        assert config.huge_tree is False
        assert config.track_memory is False
        assert config.logging_level == "INFO"
        assert config.correlation_id is None

    def test_string_whitespace_is_coerced(self) -> None:
        config = DispatchConfig(default_whitespace="keep")
        assert config.default_whitespace is WhitespaceMode.KEEP

    def test_validation_failures(self) -> None:
        """Test that invalid values raise ConfigValidationError."""
        with pytest.raises(ConfigValidationError, match="chunk_size must be > 0"):
            DispatchConfig(chunk_size=0)
        with pytest.raises(ConfigValidationError, match="memory_sample_interval"):
            DispatchConfig(memory_sample_interval=-5)
        with pytest.raises(ConfigValidationError, match="logging_level"):
            DispatchConfig(logging_level="LOUD")
        with pytest.raises(ConfigValidationError) as exc_info:
            DispatchConfig(default_whitespace="squash")
        assert exc_info.value.field_name == "default_whitespace"

    def test_validation_error_is_config_error(self) -> None:
        assert issubclass(ConfigValidationError, ConfigError)

    def test_frozen(self) -> None:
        config = DispatchConfig()
        with pytest.raises(Exception):
            config.chunk_size = 10  # type: ignore

    def test_override_returns_new_instance(self) -> None:
        config = DispatchConfig()
        derived = config.override(chunk_size=4096, strip_namespaces=False)

        assert derived is not config
        assert derived.chunk_size == 4096
        assert derived.strip_namespaces is False
        assert config.chunk_size == 64 * 1024

    def test_override_rejects_unknown_fields(self) -> None:
        with pytest.raises(ConfigValidationError, match="Unknown configuration fields"):
            DispatchConfig().override(buffer_size=10)

    def test_override_validates(self) -> None:
        with pytest.raises(ConfigValidationError):
            DispatchConfig().override(chunk_size=-1)

    def test_dict_round_trip(self) -> None:
        config = DispatchConfig(default_whitespace=WhitespaceMode.TRIM, chunk_size=512)
        data = config.to_dict()

        assert data["default_whitespace"] == "trim"
        assert DispatchConfig.from_dict(data) == config

    def test_json_serialization(self) -> None:
        config = DispatchConfig(correlation_id="abc")
        parsed = json.loads(config.to_json())

        assert parsed["correlation_id"] == "abc"
        assert DispatchConfig.from_json(config.to_json()) == config

    def test_presets(self) -> None:
        streaming = DispatchConfig.streaming()
        assert streaming.track_memory is True
        assert streaming.huge_tree is True

        debugging = DispatchConfig.debugging()
        assert debugging.default_whitespace is WhitespaceMode.KEEP
        assert debugging.logging_level == "DEBUG"
