"""Tests for the package's public surface."""

import xml_path_rules


class TestPublicAPI:
    """Test that the documented API is importable from the package root."""

    def test_version(self) -> None:
        assert xml_path_rules.__version__ == "0.1.0"

    def test_all_exports_resolve(self) -> None:
        for name in xml_path_rules.__all__:
            assert hasattr(xml_path_rules, name), name

    def test_level_one_round_trip(self) -> None:
        names = []
        result = xml_path_rules.process_string(
            "<a><b>1</b><b>2</b></a>",
            {"a": lambda node, ctx: names.extend(b.text for b in node["b[]"])},
        )
        assert names == ["1", "2"]
        assert result.completed
