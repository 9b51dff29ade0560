# -*- coding: utf-8 -*-
"""
Unit tests for filtergraph primitives
"""

import pytest

from screenedit.rendering.graph_builder import (
    FilterGraph,
    Label,
    LabelAllocator,
    format_number,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (5.0, "5"),
        (0, "0"),
        (0.25, "0.25"),
        (12.5, "12.5"),
        (0.00005, "0.00005"),
        (1e-07, "0.0000001"),
    ],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_label_rendering():
    """Stream specifiers map bare, filter outputs map bracketed"""
    assert str(Label("vout0")) == "[vout0]"
    assert Label("vout0").map_spec == "[vout0]"
    assert str(Label.input(1, "a")) == "[1:a]"
    assert Label.input(1, "a").map_spec == "1:a"


def test_allocator_counts_per_prefix():
    labels = LabelAllocator()

    assert labels.new("vpiece") == Label("vpiece0")
    assert labels.new("vpiece") == Label("vpiece1")
    assert labels.new("a") == Label("a0")
    assert labels.new("vpiece") == Label("vpiece2")


def test_allocator_never_repeats():
    labels = LabelAllocator()
    prefixes = ["a", "ab", "vpiece", "vpieceout", "s", "p", "aout"]

    issued = [labels.new(prefix).name for _ in range(20) for prefix in prefixes]

    assert len(issued) == len(set(issued))


@pytest.mark.parametrize("prefix", ["", "v1", "Vout", "a-b", "a0"])
def test_allocator_rejects_invalid_prefix(prefix):
    with pytest.raises(ValueError):
        LabelAllocator().new(prefix)


def test_filter_graph_string():
    graph = FilterGraph()
    scaled = graph.chain(Label.input(0, "v"), "scale=1920:1080", "v")
    graph.add_filter([scaled, Label.input(1, "v")], "overlay=0:0", Label("vout0"))

    assert not graph.is_empty
    assert graph.to_string() == "[0:v]scale=1920:1080[v0];[v0][1:v]overlay=0:0[vout0]"


def test_filter_graph_inputs():
    graph = FilterGraph()

    assert graph.add_input("/rec/screen.mp4", 5.0, 15.0) == 0
    assert graph.add_input("/rec/camera.mp4") == 1
    assert graph.inputs[0].seek_start == 5.0
    assert graph.inputs[1].seek_end is None
    assert graph.is_empty
    assert graph.to_string() == ""
