from collections.abc import Sequence

from lxml import etree

from contribgraph.schemas.calendar import CalendarGrid
from contribgraph.schemas.graph import GraphLink
from contribgraph.schemas.graph import GraphNode
from contribgraph.services.heatmap_service import PALETTE
from contribgraph.services.heatmap_service import band_color
from contribgraph.services.heatmap_service import week_column
from contribgraph.services.heatmap_service import weekday_row


SVG_NS = "http://www.w3.org/2000/svg"
FONT_FAMILY = "system-ui, -apple-system, Segoe UI, Roboto, sans-serif"

GRAPH_BACKGROUND = "#0b1020"
GRAPH_TITLE = "D3 Graph Rendered to PNG (Node)"
GROUP_COLORS = {1: "#22c55e", 2: "#60a5fa"}
FALLBACK_GROUP_COLOR = "#f59e0b"

CALENDAR_BACKGROUND = "#ffffff"
CELL_SIZE = 11
CELL_GAP = 3
CELL_STEP = CELL_SIZE + CELL_GAP
LEFT_MARGIN = 36
RIGHT_MARGIN = 16
TOP_MARGIN = 44
BOTTOM_MARGIN = 32
LABEL_COLOR = "#57606a"
CELL_BORDER = "#1b1f23"
MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
WEEKDAY_LABELS = {1: "Mon", 3: "Wed", 5: "Fri"}


def element(
    parent: etree._Element | None, tag: str, text: str | None = None, **attrs
) -> etree._Element:
    """Create an SVG element; `stroke_width=2` becomes `stroke-width="2"`.

    Attribute values are written as `str(value)` and never rounded.
    """

    attributes = {
        name.rstrip("_").replace("_", "-"): str(value) for name, value in attrs.items()
    }
    if parent is None:
        node = etree.Element(f"{{{SVG_NS}}}{tag}", attributes, nsmap={None: SVG_NS})
    else:
        node = etree.SubElement(parent, f"{{{SVG_NS}}}{tag}", attributes)
    if text is not None:
        node.text = text
    return node


def serialize(root: etree._Element) -> str:
    return etree.tostring(root, encoding="unicode")


def node_radius(node: GraphNode) -> int:
    return 22 if node.id == "You" else 18


def node_color(node: GraphNode) -> str:
    return GROUP_COLORS.get(node.group, FALLBACK_GROUP_COLOR)


def build_graph_svg(
    nodes: Sequence[GraphNode],
    links: Sequence[GraphLink],
    width: int,
    height: int,
    title: str = GRAPH_TITLE,
) -> str:
    """Draw settled nodes and their links as arrowed lines."""

    positions = {
        node.id: (
            node.x if node.x is not None else width / 2,
            node.y if node.y is not None else height / 2,
        )
        for node in nodes
    }

    svg = element(
        None,
        "svg",
        width=width,
        height=height,
        viewBox=f"0 0 {width} {height}",
        style=f"background: {GRAPH_BACKGROUND}",
    )
    element(svg, "rect", width=width, height=height, fill=GRAPH_BACKGROUND)

    defs = element(svg, "defs")
    marker = element(
        defs,
        "marker",
        id="arrow",
        viewBox="0 -5 10 10",
        refX=18,
        refY=0,
        markerWidth=6,
        markerHeight=6,
        orient="auto",
    )
    element(marker, "path", d="M0,-5L10,0L0,5", fill="#94a3b8")

    element(
        svg,
        "text",
        title,
        x=24,
        y=42,
        fill="#e2e8f0",
        font_family=FONT_FAMILY,
        font_size=22,
        font_weight=700,
    )

    canvas = element(svg, "g", transform="translate(0, 10)")

    edges = element(canvas, "g", stroke="#94a3b8", stroke_opacity=0.75)
    for link in links:
        x1, y1 = positions.get(link.source, (0, 0))
        x2, y2 = positions.get(link.target, (0, 0))
        element(
            edges,
            "line",
            x1=x1,
            y1=y1,
            x2=x2,
            y2=y2,
            stroke_width=max(1, link.value),
            marker_end="url(#arrow)",
        )

    vertices = element(canvas, "g")
    for node in nodes:
        x, y = positions[node.id]
        group = element(vertices, "g", transform=f"translate({x}, {y})")
        element(
            group,
            "circle",
            r=node_radius(node),
            fill=node_color(node),
            stroke="#0f172a",
            stroke_width=3,
        )
        element(
            group,
            "text",
            node.id,
            text_anchor="middle",
            dy=5,
            fill=GRAPH_BACKGROUND,
            font_family=FONT_FAMILY,
            font_size=12,
            font_weight=800,
        )

    return serialize(svg)


def calendar_size(week_count: int) -> tuple[int, int]:
    """Return (width, height) of the calendar image for `week_count` columns."""

    width = LEFT_MARGIN + week_count * CELL_STEP + RIGHT_MARGIN
    height = TOP_MARGIN + 7 * CELL_STEP + BOTTOM_MARGIN
    return width, height


def cell_origin(column: int, row: int) -> tuple[int, int]:
    return LEFT_MARGIN + column * CELL_STEP, TOP_MARGIN + row * CELL_STEP


def build_calendar_svg(grid: CalendarGrid) -> str:
    """Draw the contribution calendar with month, weekday and legend labels."""

    width, height = calendar_size(len(grid.weeks))
    svg = element(
        None,
        "svg",
        width=width,
        height=height,
        viewBox=f"0 0 {width} {height}",
    )
    element(svg, "rect", width=width, height=height, fill=CALENDAR_BACKGROUND)

    noun = "contribution" if grid.total == 1 else "contributions"
    element(
        svg,
        "text",
        f"{grid.total} {noun} in {grid.year}",
        x=LEFT_MARGIN,
        y=20,
        fill="#24292f",
        font_family=FONT_FAMILY,
        font_size=14,
        font_weight=600,
    )

    labels = element(
        svg, "g", fill=LABEL_COLOR, font_family=FONT_FAMILY, font_size=10
    )
    for month in grid.months:
        x, _ = cell_origin(month.column, 0)
        name = MONTH_NAMES[month.date.month - 1]
        element(labels, "text", name, x=x, y=TOP_MARGIN - 6)
    for row, name in WEEKDAY_LABELS.items():
        _, y = cell_origin(0, row)
        element(
            labels,
            "text",
            name,
            x=LEFT_MARGIN - 6,
            y=y + CELL_SIZE - 2,
            text_anchor="end",
        )

    cells = element(svg, "g", id="days")
    for day in grid.days:
        column = week_column(grid.start, day.date)
        x, y = cell_origin(column, weekday_row(day.date))
        if not day.in_year:
            element(
                cells,
                "rect",
                x=x,
                y=y,
                width=CELL_SIZE,
                height=CELL_SIZE,
                fill=CALENDAR_BACKGROUND,
            )
            continue
        cell = element(
            cells,
            "rect",
            x=x,
            y=y,
            width=CELL_SIZE,
            height=CELL_SIZE,
            rx=2,
            fill=band_color(day.count),
            stroke=CELL_BORDER,
            stroke_opacity=0.06,
        )
        element(cell, "title", f"{day.count} on {day.date.isoformat()}")

    legend_y = TOP_MARGIN + 7 * CELL_STEP + 10
    legend_x = width - RIGHT_MARGIN - 30 - len(PALETTE) * CELL_STEP
    legend = element(svg, "g", id="legend")
    element(
        legend,
        "text",
        "Less",
        x=legend_x - 4,
        y=legend_y + CELL_SIZE - 2,
        text_anchor="end",
        fill=LABEL_COLOR,
        font_family=FONT_FAMILY,
        font_size=10,
    )
    for index, color in enumerate(PALETTE):
        element(
            legend,
            "rect",
            x=legend_x + index * CELL_STEP,
            y=legend_y,
            width=CELL_SIZE,
            height=CELL_SIZE,
            rx=2,
            fill=color,
            stroke=CELL_BORDER,
            stroke_opacity=0.06,
        )
    element(
        legend,
        "text",
        "More",
        x=legend_x + len(PALETTE) * CELL_STEP + 2,
        y=legend_y + CELL_SIZE - 2,
        fill=LABEL_COLOR,
        font_family=FONT_FAMILY,
        font_size=10,
    )

    return serialize(svg)
