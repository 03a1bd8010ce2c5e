"""
Visibility Policy Tests
"""

import pytest

from graphview import ConfigurationError, ElementKind, LabelVisibilityType, VisibilityConfig
from graphview.core.visibility import calc_label_visibility


class TestVisibilityModes:

    def test_all(self):
        check = calc_label_visibility(10_000, LabelVisibilityType.ALL)
        assert check("node", 0) is True
        assert check("edge", None) is True

    def test_none(self):
        check = calc_label_visibility(1, LabelVisibilityType.NONE)
        assert check("node", 100) is False
        assert check("edge", 100) is False

    def test_nodes_only(self):
        check = calc_label_visibility(1, "nodes")
        assert check(ElementKind.NODE, 1) is True
        assert check(ElementKind.EDGE, 100) is False

    def test_edges_only(self):
        check = calc_label_visibility(1, "edges")
        assert check(ElementKind.NODE, 100) is False
        assert check(ElementKind.EDGE, 1) is True


class TestAutoVisibility:

    def test_small_graph_large_node_visible(self):
        check = calc_label_visibility(10, "auto")
        assert check("node", 7) is True

    def test_small_size_hidden(self):
        check = calc_label_visibility(10, "auto")
        assert check("node", 5) is False
        assert check("edge", None) is False

    def test_dense_graph_hidden(self):
        config = VisibilityConfig(density_threshold=100)
        assert calc_label_visibility(99, "auto", config)("node", 50) is True
        assert calc_label_visibility(100, "auto", config)("node", 50) is False

    def test_count_at_default_threshold_hidden(self):
        assert calc_label_visibility(499, "auto")("node", 10) is True
        assert calc_label_visibility(500, "auto")("node", 10) is False

    @pytest.mark.parametrize("size", [6, 10, 50])
    def test_monotonic_in_node_count(self, size):
        """Crossing the density threshold only ever turns labels off."""
        config = VisibilityConfig(density_threshold=50)
        previous = True
        for count in range(0, 200, 7):
            visible = calc_label_visibility(count, "auto", config)("node", size)
            assert not (visible and not previous)
            previous = visible


class TestVisibilityConfiguration:

    def test_unknown_mode_fails_fast(self):
        with pytest.raises(ConfigurationError):
            calc_label_visibility(1, "some")

    def test_unknown_kind_fails(self):
        check = calc_label_visibility(1, "all")
        with pytest.raises(ConfigurationError):
            check("cluster", 1)
