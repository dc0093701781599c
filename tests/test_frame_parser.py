"""
Frame Parser Tests
Covers block splitting, padding and the baseline substitution rules.
"""

import numpy as np
import pytest

from pressure_dashboard.config import MonitorConfig
from pressure_dashboard.core.frame_parser import FrameParser, parse_frames

from conftest import grid_text


def test_single_full_block_is_one_frame(config):
    parsed = parse_frames(grid_text(1), config)

    assert len(parsed) == 1
    assert parsed.frames[0].shape == (1024,)
    assert np.all(parsed.frames[0] == 1.0)
    assert parsed.last_frame is parsed.frames[-1]
    assert parsed.degraded_tokens == 0


def test_two_blocks_keep_file_order(config):
    parsed = parse_frames(grid_text(1) + grid_text(255), config)

    assert len(parsed) == 2
    assert np.all(parsed.frames[0] == 1.0)
    assert np.all(parsed.frames[1] == 255.0)
    assert np.all(parsed.last_frame == 255.0)


def test_empty_input_gives_one_baseline_frame(config):
    for text in ("", "\n\n  \n", None):
        parsed = parse_frames(text, config)
        assert len(parsed) == 1
        assert np.all(parsed.last_frame == config.baseline_value)


def test_short_input_is_front_padded(small_config):
    parsed = FrameParser(small_config).parse("5,6,7,8\n9,10,11,12\n")

    assert len(parsed) == 1
    grid = parsed.last_grid
    assert np.all(grid[:2] == 1.0), "padding rows should come first"
    assert grid[2].tolist() == [5, 6, 7, 8]
    assert grid[3].tolist() == [9, 10, 11, 12]


def test_trailing_partial_block_is_dropped(small_config):
    text = "\n".join(["2,2,2,2"] * 4 + ["9,9,9,9"] * 3)
    parsed = FrameParser(small_config).parse(text)

    assert len(parsed) == 1
    assert np.all(parsed.last_frame == 2.0)


def test_short_rows_padded_long_rows_truncated(small_config):
    text = "3,3\n4,4,4,4,4,4\n5,5,5,5\n6,6,6,6\n"
    grid = FrameParser(small_config).parse(text).last_grid

    assert grid[0].tolist() == [3, 3, 1, 1]
    assert grid[1].tolist() == [4, 4, 4, 4]


@pytest.mark.parametrize("token", ["abc", "nan", "inf", "-5", "4096", ""])
def test_invalid_tokens_become_baseline(small_config, token):
    text = f"7,{token},7,7\n" + "7,7,7,7\n" * 3
    parsed = FrameParser(small_config).parse(text)

    assert parsed.last_grid[0, 1] == small_config.baseline_value
    assert parsed.degraded_tokens == 1


def test_range_bounds_are_inclusive(small_config):
    parsed = FrameParser(small_config).parse("0,4095,0,4095\n" * 4)
    assert parsed.degraded_tokens == 0
    assert parsed.last_grid[0].tolist() == [0, 4095, 0, 4095]


def test_mixed_delimiters_and_crlf(small_config):
    text = "1; 2\t3 ,4\r\n" * 4
    parsed = FrameParser(small_config).parse(text)
    assert parsed.last_grid[0].tolist() == [1, 2, 3, 4]
    assert parsed.degraded_tokens == 0


def test_frames_are_read_only(config):
    frame = parse_frames(grid_text(10), config).last_frame
    with pytest.raises(ValueError):
        frame[0] = 99.0


def test_parse_is_deterministic(config):
    text = grid_text(3) + grid_text(40)
    first = parse_frames(text, config)
    second = parse_frames(text, config)
    assert all(np.array_equal(a, b) for a, b in zip(first.frames, second.frames))


def test_custom_baseline_is_used():
    cfg = MonitorConfig(grid_rows=2, grid_cols=2, baseline_value=0.5)
    parsed = parse_frames("x,2\n", cfg)
    assert parsed.last_grid.tolist() == [[0.5, 0.5], [0.5, 2.0]]
