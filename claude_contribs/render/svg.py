"""
SVG rendering of contribution grids.
"""

import html
from pathlib import Path
from typing import List, Union

from claude_contribs.core.grid import DAYS_PER_WEEK, ContributionGrid, month_label_columns
from claude_contribs.core.intensity import MAX_LEVEL
from claude_contribs.utils.formatting import format_token_count

LEVEL_COLORS = ["#ebedf0", "#9be9a8", "#40c463", "#30a14e", "#216e39"]

CELL_SIZE = 11
CELL_GAP = 1
CELL_STRIDE = CELL_SIZE + CELL_GAP
CELL_RADIUS = 2
HEADER_HEIGHT = 50
MONTH_LABEL_HEIGHT = 15
DAY_LABEL_WIDTH = 30
MARGIN = 20
LEGEND_HEIGHT = 40

# SVG labels are spread a little wider than the terminal's four weeks
SVG_WEEKS_PER_MONTH = 4.5

FONT = 'font-family="Arial, sans-serif"'
LABEL_STYLE = f'{FONT} font-size="9" fill="#666"'

DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def level_color(level: int) -> str:
    if 0 <= level <= MAX_LEVEL:
        return LEVEL_COLORS[level]
    return LEVEL_COLORS[0]


def _cell(x: float, y: float, color: str, title: str = "") -> str:
    rect = (
        f'<rect x="{x:g}" y="{y:g}" width="{CELL_SIZE}" height="{CELL_SIZE}" '
        f'rx="{CELL_RADIUS}" ry="{CELL_RADIUS}" fill="{color}" '
        f'stroke="#1b1f23" stroke-width="0.5"'
    )
    if title:
        return f'{rect}><title>{html.escape(title)}</title></rect>'
    return rect + "/>"


def render_svg(grid: ContributionGrid) -> str:
    """Render a grid as a standalone SVG document."""
    grid_x = MARGIN + DAY_LABEL_WIDTH
    grid_y = HEADER_HEIGHT + MONTH_LABEL_HEIGHT
    width = grid_x + len(grid.weeks) * CELL_STRIDE + MARGIN
    height = grid_y + DAYS_PER_WEEK * CELL_STRIDE + LEGEND_HEIGHT

    parts: List[str] = [
        f'<svg width="{width}" height="{height}" viewBox="0 0 {width} {height}" '
        f'xmlns="http://www.w3.org/2000/svg">',
        '<rect width="100%" height="100%" fill="white"/>',
        f'<text x="{MARGIN}" y="22" {FONT} font-size="14" font-weight="bold">'
        f'Claude Contributions {html.escape(grid.date_range)}</text>',
        f'<text x="{MARGIN}" y="38" {FONT} font-size="10" fill="#666">'
        f'Total: {format_token_count(grid.total_tokens)} tokens | '
        f'Max daily: {format_token_count(grid.max_daily_tokens)}</text>',
    ]

    for label, column in month_label_columns(grid.start_month, SVG_WEEKS_PER_MONTH):
        if column >= len(grid.weeks):
            break
        x = grid_x + column * CELL_STRIDE
        parts.append(f'<text x="{x:g}" y="{grid_y - 4}" {LABEL_STYLE}>{label}</text>')

    for index, name in enumerate(DAY_NAMES):
        if index % 2 == 1:
            y = grid_y + index * CELL_STRIDE + CELL_SIZE - 2
            parts.append(f'<text x="{MARGIN}" y="{y}" {LABEL_STYLE}>{name}</text>')

    for week_index, week in enumerate(grid.weeks):
        for day_index, day in enumerate(week.days):
            parts.append(_cell(
                grid_x + week_index * CELL_STRIDE,
                grid_y + day_index * CELL_STRIDE,
                level_color(day.level),
                f"{day.date}: {format_token_count(day.tokens)} tokens"
            ))

    legend_y = grid_y + DAYS_PER_WEEK * CELL_STRIDE + 20
    parts.append(f'<text x="{grid_x}" y="{legend_y}" {LABEL_STYLE}>Less</text>')
    legend_x = grid_x + 25
    for level in range(MAX_LEVEL + 1):
        parts.append(_cell(legend_x + level * CELL_STRIDE, legend_y - 9, level_color(level)))
    parts.append(
        f'<text x="{legend_x + (MAX_LEVEL + 1) * CELL_STRIDE + 4}" y="{legend_y}" {LABEL_STYLE}>More</text>'
    )

    parts.append("</svg>")
    return "\n".join(parts)


def svg_filename(year: int, start_month: int = 1) -> str:
    """Export file name; the start month is added when it isn't January."""
    if start_month == 1:
        return f"claude-contributions-{year}.svg"
    return f"claude-contributions-{year}-{start_month:02d}.svg"


def write_svg(grid: ContributionGrid, path: Union[str, Path]) -> Path:
    """Render and write a grid to path.

    Raises:
        OSError: If the file cannot be written
    """
    target = Path(path)
    target.write_text(render_svg(grid), encoding="utf-8")
    return target
