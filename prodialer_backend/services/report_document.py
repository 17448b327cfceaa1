from __future__ import annotations

import logging
import math
import textwrap
from dataclasses import dataclass, field
from typing import ClassVar, Final, List, Optional, Sequence, Tuple

from prodialer_backend.schemas.report import ReportSnapshot

logger = logging.getLogger("prodialer.report_document")

# Geometry is in millimetres; font sizes are in points.
PT_TO_MM: Final[float] = 0.3528
LINE_SPACING: Final[float] = 1.4
# Average glyph width as a fraction of the font size (Helvetica-ish).
GLYPH_WIDTH_RATIO: Final[float] = 0.5
CELL_PADDING: Final[float] = 1.5
SECTION_GAP: Final[float] = 5.0

TITLE_SIZE: Final[float] = 20
PERIOD_SIZE: Final[float] = 12
HEADING_SIZE: Final[float] = 14
BODY_SIZE: Final[float] = 10
TABLE_SIZE: Final[float] = 9

ACTIVITY_COLUMNS: Final[Tuple[str, ...]] = ("Name", "Phone", "Outcome", "Duration", "Status")
ACTIVITY_COLUMN_WEIGHTS: Final[Tuple[float, ...]] = (3, 2.5, 2, 1.5, 2)


def line_height(font_size: float) -> float:
    return font_size * PT_TO_MM * LINE_SPACING


def wrap_text(text: str, width: float, font_size: float) -> List[str]:
    """Greedy word wrap using an average glyph width; never returns an empty list."""
    glyph = font_size * PT_TO_MM * GLYPH_WIDTH_RATIO
    max_chars = max(1, int(width // glyph))
    lines: List[str] = []
    for paragraph in str(text).splitlines() or [""]:
        lines.extend(
            textwrap.wrap(
                paragraph,
                width=max_chars,
                break_long_words=True,
                replace_whitespace=False,
            )
            or [""]
        )
    return lines


# ---------------------------------------------------------------------------
# Layout model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PageLayout:
    """A4 portrait with 20 mm margins by default."""

    width: float = 210.0
    height: float = 297.0
    margin_top: float = 20.0
    margin_bottom: float = 20.0
    margin_left: float = 20.0
    margin_right: float = 20.0

    @property
    def content_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def content_bottom(self) -> float:
        return self.height - self.margin_bottom


@dataclass(frozen=True)
class TextBlock:
    kind: ClassVar[str] = "text"

    lines: Tuple[str, ...]
    x: float
    y: float
    width: float
    font_size: float
    line_height: float
    bold: bool = False

    @property
    def height(self) -> float:
        return len(self.lines) * self.line_height

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class TableRow:
    cells: Tuple[Tuple[str, ...], ...]
    height: float
    header: bool = False


@dataclass(frozen=True)
class TableBlock:
    kind: ClassVar[str] = "table"

    x: float
    y: float
    column_widths: Tuple[float, ...]
    rows: Tuple[TableRow, ...]
    font_size: float
    line_height: float

    @property
    def width(self) -> float:
        return sum(self.column_widths)

    @property
    def height(self) -> float:
        return sum(row.height for row in self.rows)

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass
class Page:
    number: int
    width: float
    height: float
    blocks: List[object] = field(default_factory=list)


@dataclass(frozen=True)
class ReportDocument:
    title: str
    layout: PageLayout
    pages: Tuple[Page, ...]


class ReportDocumentBuilder:
    """
    Places blocks top to bottom with a running cursor.

    Every add_* call returns the cursor after the content it placed, so a
    section starts where the previous one actually ended. Content that
    does not fit on the current page moves to a new one.
    """

    def __init__(self, title: str, layout: Optional[PageLayout] = None) -> None:
        self.title = title
        self.layout = layout or PageLayout()
        self._pages: List[Page] = []
        self._cursor = 0.0
        self._new_page()

    @property
    def cursor(self) -> float:
        return self._cursor

    @property
    def page(self) -> Page:
        return self._pages[-1]

    def _new_page(self) -> None:
        self._pages.append(
            Page(
                number=len(self._pages) + 1,
                width=self.layout.width,
                height=self.layout.height,
            )
        )
        self._cursor = self.layout.margin_top

    def _at_page_top(self) -> bool:
        return math.isclose(self._cursor, self.layout.margin_top)

    def _fits(self, height: float) -> bool:
        return self._cursor + height <= self.layout.content_bottom + 1e-9

    def ensure_space(self, height: float) -> float:
        """Start a new page unless `height` fits below the cursor."""
        if not self._fits(height) and not self._at_page_top():
            self._new_page()
        return self._cursor

    def add_space(self, height: float) -> float:
        if self._fits(height):
            self._cursor += height
        else:
            self._new_page()
        return self._cursor

    def add_text(self, text: str, font_size: float = BODY_SIZE, bold: bool = False) -> float:
        lh = line_height(font_size)
        remaining = wrap_text(text, self.layout.content_width, font_size)

        while remaining:
            self.ensure_space(lh)
            capacity = max(1, int((self.layout.content_bottom - self._cursor + 1e-9) // lh))
            chunk, remaining = remaining[:capacity], remaining[capacity:]
            block = TextBlock(
                lines=tuple(chunk),
                x=self.layout.margin_left,
                y=self._cursor,
                width=self.layout.content_width,
                font_size=font_size,
                line_height=lh,
                bold=bold,
            )
            self.page.blocks.append(block)
            self._cursor = block.bottom
            if remaining:
                self._new_page()

        return self._cursor

    def _table_row(
        self,
        values: Sequence[str],
        widths: Sequence[float],
        font_size: float,
        header: bool = False,
    ) -> TableRow:
        lh = line_height(font_size)
        cells = tuple(
            tuple(wrap_text(value, max(width - 2 * CELL_PADDING, 1.0), font_size))
            for value, width in zip(values, widths)
        )
        tallest = max((len(cell) for cell in cells), default=1)
        return TableRow(cells=cells, height=tallest * lh + 2 * CELL_PADDING, header=header)

    def add_table(
        self,
        columns: Sequence[str],
        rows: Sequence[Sequence[str]],
        font_size: float = TABLE_SIZE,
        weights: Optional[Sequence[float]] = None,
    ) -> float:
        """
        Place a grid table. Rows that do not fit continue on the next page
        under a repeated header row.
        """
        weights = list(weights or [1] * len(columns))
        total_weight = sum(weights)
        widths = tuple(self.layout.content_width * w / total_weight for w in weights)
        lh = line_height(font_size)

        header = self._table_row(columns, widths, font_size, header=True)
        body = [self._table_row(row, widths, font_size) for row in rows]

        first_height = header.height + (body[0].height if body else 0)
        self.ensure_space(first_height)

        current: List[TableRow] = [header]
        start = self._cursor
        used = header.height

        for row in body:
            overflows = start + used + row.height > self.layout.content_bottom + 1e-9
            if overflows and len(current) > 1:
                self._place_table(start, widths, current, font_size, lh)
                self._new_page()
                start = self._cursor
                current = [header]
                used = header.height
            current.append(row)
            used += row.height

        self._place_table(start, widths, current, font_size, lh)
        return self._cursor

    def _place_table(
        self,
        y: float,
        widths: Tuple[float, ...],
        rows: List[TableRow],
        font_size: float,
        lh: float,
    ) -> None:
        block = TableBlock(
            x=self.layout.margin_left,
            y=y,
            column_widths=widths,
            rows=tuple(rows),
            font_size=font_size,
            line_height=lh,
        )
        self.page.blocks.append(block)
        self._cursor = block.bottom

    def build(self) -> ReportDocument:
        return ReportDocument(title=self.title, layout=self.layout, pages=tuple(self._pages))


# ---------------------------------------------------------------------------
# Report sections
# ---------------------------------------------------------------------------

def render_title(builder: ReportDocumentBuilder, product_name: str) -> float:
    return builder.add_text(f"{product_name} Analytics Report", TITLE_SIZE, bold=True)


def render_period(builder: ReportDocumentBuilder, range_code: str) -> float:
    builder.add_space(SECTION_GAP / 2)
    return builder.add_text(f"Report Period: Last {range_code}", PERIOD_SIZE)


def _render_heading(builder: ReportDocumentBuilder, text: str, keep_with: float) -> float:
    builder.add_space(SECTION_GAP)
    builder.ensure_space(line_height(HEADING_SIZE) + keep_with)
    return builder.add_text(text, HEADING_SIZE, bold=True)


def render_summary(builder: ReportDocumentBuilder, snapshot: ReportSnapshot) -> float:
    _render_heading(builder, "Summary Statistics", line_height(BODY_SIZE))
    builder.add_text(f"Total Leads: {snapshot.total_leads}")
    builder.add_text(f"Total Calls: {snapshot.total_calls}")
    builder.add_text(f"Success Rate: {snapshot.success_rate}%")
    return builder.add_text(f"Average Call Duration: {snapshot.average_call_duration}s")


def render_status_breakdown(builder: ReportDocumentBuilder, snapshot: ReportSnapshot) -> float:
    _render_heading(builder, "Calls by Status", line_height(BODY_SIZE))
    for status, count in snapshot.calls_by_status.items():
        builder.add_text(f"{status or 'Unassigned'}: {count}")
    return builder.cursor


def activity_rows(snapshot: ReportSnapshot) -> List[List[str]]:
    return [
        [
            record.name,
            record.phone,
            record.outcome,
            f"{record.duration}s",
            record.status,
        ]
        for record in snapshot.recent_activity
    ]


def render_activity_table(builder: ReportDocumentBuilder, snapshot: ReportSnapshot) -> float:
    header_room = line_height(TABLE_SIZE) * 2 + 4 * CELL_PADDING
    _render_heading(builder, "Recent Call Activity", header_room)
    return builder.add_table(
        ACTIVITY_COLUMNS,
        activity_rows(snapshot),
        TABLE_SIZE,
        weights=ACTIVITY_COLUMN_WEIGHTS,
    )


def build_report_document(
    snapshot: ReportSnapshot,
    range_code: Optional[str] = None,
    product_name: str = "ProDialer",
    layout: Optional[PageLayout] = None,
) -> ReportDocument:
    """
    Lay out the analytics report: title, period, summary, status
    breakdown, recent activity table, in that order.

    Reads the snapshot only.
    """
    code = range_code or snapshot.range_code
    builder = ReportDocumentBuilder(f"{product_name} Analytics Report", layout)

    render_title(builder, product_name)
    render_period(builder, code)
    render_summary(builder, snapshot)
    render_status_breakdown(builder, snapshot)
    render_activity_table(builder, snapshot)

    document = builder.build()
    logger.debug(
        "Laid out report document (range=%s, pages=%d, activity_rows=%d)",
        code,
        len(document.pages),
        len(snapshot.recent_activity),
    )
    return document
