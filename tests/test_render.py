"""
Unit tests for terminal and SVG rendering.
"""

import io

import pytest
from rich.console import Console

from claude_contribs.core.grid import MAX_WEEKS, build_contribution_grid
from claude_contribs.render.svg import LEVEL_COLORS, level_color, render_svg, svg_filename, write_svg
from claude_contribs.render.terminal import CELL, level_style, month_label_line, render_terminal
from claude_contribs.storage.models import DailyUsage


def create_daily(date_key, total_tokens):
    return DailyUsage(
        date=date_key,
        total_tokens=total_tokens,
        input_tokens=total_tokens,
        output_tokens=0,
        entry_count=1
    )


@pytest.fixture
def grid():
    return build_contribution_grid(
        [create_daily("2024-03-05", 1500), create_daily("2024-03-06", 6000)],
        2024
    )


class TestTerminalRenderer:
    """Test the Rich terminal rendering."""

    def test_header_and_summary(self, grid):
        text = render_terminal(grid).plain

        assert "Claude Contributions 2024" in text
        assert "Total tokens: 7.5K | Max daily: 6.0K" in text

    def test_grid_and_legend(self, grid):
        text = render_terminal(grid).plain

        # One cell per grid day plus one per legend level
        assert text.count(CELL) == MAX_WEEKS * 7 + 5
        assert "Less" in text
        assert "More" in text
        assert "Mon" in text and "Wed" in text and "Fri" in text

    def test_custom_window_header(self):
        grid = build_contribution_grid([create_daily("2024-08-01", 10)], 2024, start_month=7)
        assert "Claude Contributions July 2024 - June 2025" in render_terminal(grid).plain

    def test_prints_without_wrapping(self, grid):
        buffer = io.StringIO()
        Console(file=buffer, width=200, color_system=None).print(render_terminal(grid), soft_wrap=True)

        rows = [line for line in buffer.getvalue().splitlines() if line.startswith("Mon")]
        assert len(rows) == 1
        assert rows[0].count(CELL) == MAX_WEEKS

    def test_month_labels_follow_start_month(self):
        assert month_label_line(1, MAX_WEEKS).startswith("Jan")
        assert month_label_line(7, MAX_WEEKS).startswith("Jul")

    def test_month_labels_trimmed_to_grid_width(self):
        line = month_label_line(1, 10)
        assert len(line) <= 20
        assert "Apr" not in line

    def test_unknown_level_falls_back(self):
        assert level_style(9) == level_style(0)


class TestSvgRenderer:
    """Test SVG document generation."""

    def test_document_shape(self, grid):
        svg = render_svg(grid)

        assert svg.startswith("<svg")
        assert svg.endswith("</svg>")
        assert 'xmlns="http://www.w3.org/2000/svg"' in svg
        assert "Claude Contributions 2024" in svg

    def test_every_day_has_a_tooltip(self, grid):
        svg = render_svg(grid)

        assert svg.count("<title>") == MAX_WEEKS * 7
        assert "<title>2024-03-05: 1.5K tokens</title>" in svg
        assert "<title>2024-03-06: 6.0K tokens</title>" in svg

    def test_colors_and_legend(self, grid):
        svg = render_svg(grid)

        for color in LEVEL_COLORS:
            assert f'fill="{color}"' in svg
        assert ">Less</text>" in svg
        assert ">More</text>" in svg

    def test_level_color_bounds(self):
        assert level_color(4) == "#216e39"
        assert level_color(-1) == LEVEL_COLORS[0]

    @pytest.mark.parametrize("year, start_month, expected", [
        (2024, 1, "claude-contributions-2024.svg"),
        (2024, 7, "claude-contributions-2024-07.svg"),
        (2023, 12, "claude-contributions-2023-12.svg"),
    ])
    def test_svg_filename(self, year, start_month, expected):
        assert svg_filename(year, start_month) == expected

    def test_write_svg(self, grid, tmp_path):
        target = tmp_path / "map.svg"

        written = write_svg(grid, target)

        assert written == target
        assert target.read_text(encoding="utf-8") == render_svg(grid)

    def test_write_svg_failure_raises(self, grid, tmp_path):
        with pytest.raises(OSError):
            write_svg(grid, tmp_path / "missing" / "map.svg")
