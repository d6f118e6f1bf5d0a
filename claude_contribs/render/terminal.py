"""
Terminal rendering of contribution grids.

Builds a Rich Text block: header, month labels, a 7-row grid of colored
squares and a Less/More legend.
"""

from rich.text import Text

from claude_contribs.core.grid import DAYS_PER_WEEK, ContributionGrid, month_label_columns
from claude_contribs.core.intensity import MAX_LEVEL
from claude_contribs.utils.formatting import format_token_count

CELL = "■"

LEVEL_STYLES = {
    0: "grey50",
    1: "green",
    2: "bright_green",
    3: "#40c463",
    4: "#30a14e",
}

# Only Mon/Wed/Fri are labelled
DAY_LABELS = ["", "Mon", "", "Wed", "", "Fri", ""]

# Each week column is a cell plus a space
CHARS_PER_WEEK = 2
ROW_PREFIX_WIDTH = 4


def level_style(level: int) -> str:
    return LEVEL_STYLES.get(level, LEVEL_STYLES[0])


def month_label_line(start_month: int, weeks: int) -> str:
    """Month abbreviations spaced four weeks apart, trimmed to the grid width."""
    line = ""
    for label, column in month_label_columns(start_month):
        position = int(column) * CHARS_PER_WEEK
        line = line.ljust(position) + label
    return line[:weeks * CHARS_PER_WEEK]


def render_legend() -> Text:
    legend = Text("Less ", style="grey50")
    for level in range(MAX_LEVEL + 1):
        legend.append(CELL, style=level_style(level))
        legend.append(" ")
    legend.append("More", style="grey50")
    return legend


def render_terminal(grid: ContributionGrid) -> Text:
    """Render a grid for terminal display."""
    output = Text()
    output.append("\n")
    output.append(f"Claude Contributions {grid.date_range}", style="bold")
    output.append("\n")
    output.append(
        f"Total tokens: {format_token_count(grid.total_tokens)} | "
        f"Max daily: {format_token_count(grid.max_daily_tokens)}",
        style="grey50"
    )
    output.append("\n\n")

    output.append(" " * ROW_PREFIX_WIDTH + month_label_line(grid.start_month, len(grid.weeks)))
    output.append("\n")

    for day_index in range(DAYS_PER_WEEK):
        output.append(DAY_LABELS[day_index].ljust(ROW_PREFIX_WIDTH))
        for week in grid.weeks:
            day = week.days[day_index]
            output.append(CELL, style=level_style(day.level))
            output.append(" ")
        output.append("\n")

    output.append("\n")
    output.append_text(render_legend())
    output.append("\n")
    return output
