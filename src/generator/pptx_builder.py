"""PPTX builder engine — renders a LeaderboardView as a one-slide deck.

The slide carries a title, a ranked table (rank cells tinted gold, silver
and bronze for the podium), and, when the sorted records are supplied, a
column chart of total wagered per affiliate.  An empty view renders the
empty-state copy instead of the table.

Usage::

    from src.generator.pptx_builder import PPTXBuilder

    builder = PPTXBuilder()
    pptx_bytes = builder.build(view, records)

    with open("leaderboard.pptx", "wb") as f:
        f.write(pptx_bytes)
"""

import io
from pathlib import Path

from pptx import Presentation
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.util import Inches, Pt

from src.schema.models import (
    AffiliateRecord,
    DesignSystem,
    LeaderboardRow,
    LeaderboardView,
)

from .charts import _hex_to_rgb, add_wagered_chart


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SLIDE_WIDTH_IN = 13.333
SLIDE_HEIGHT_IN = 7.5

# (header, row attribute, alignment)
TABLE_COLUMNS = [
    ("Rank", "rank", "center"),
    ("Affiliate", "code", "left"),
    ("Last Active", "last_active", "left"),
    ("Total Wagered", "total_wagered", "right"),
    ("Total Earnings", "total_earnings", "right"),
    ("Users", "users_registered", "right"),
]

_ALIGN_MAP = {
    "left": PP_ALIGN.LEFT,
    "center": PP_ALIGN.CENTER,
    "right": PP_ALIGN.RIGHT,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _cell_text(row: LeaderboardRow, attr: str) -> str:
    return str(getattr(row, attr))


# ---------------------------------------------------------------------------
# PPTXBuilder
# ---------------------------------------------------------------------------

class PPTXBuilder:
    """Builds a leaderboard presentation from a view.

    Parameters
    ----------
    design : DesignSystem, optional
        Colors and fonts.
    title : str
        Slide title.
    max_rows : int
        Rows beyond this rank are left off the slide.
    """

    def __init__(self, design: DesignSystem | None = None,
                 title: str = "Wager Leaderboard", max_rows: int = 15) -> None:
        self.design = design or DesignSystem()
        self.title = title
        self.max_rows = max_rows

    def build(self, view: LeaderboardView,
              records: list[AffiliateRecord] | None = None) -> bytes:
        """Build the PPTX and return it as bytes.

        Parameters
        ----------
        view : LeaderboardView
            Ranked rows or empty state.
        records : list[AffiliateRecord], optional
            The sorted records behind *view*; enables the wagered chart.
        """
        prs = Presentation()
        prs.slide_width = Inches(SLIDE_WIDTH_IN)
        prs.slide_height = Inches(SLIDE_HEIGHT_IN)

        slide = prs.slides.add_slide(prs.slide_layouts[6])  # Blank layout
        self._render_title(slide)

        if view.is_empty:
            self._render_empty_state(slide, view)
        else:
            rows = view.rows[: self.max_rows]
            has_chart = bool(records)
            table_width = 7.2 if has_chart else SLIDE_WIDTH_IN - 1.0
            self._render_table(slide, rows, table_width)
            if has_chart:
                add_wagered_chart(
                    slide, records, self.design,
                    (8.0, 1.3, SLIDE_WIDTH_IN - 8.5, 5.6),
                    limit=self.max_rows,
                )

        buf = io.BytesIO()
        prs.save(buf)
        return buf.getvalue()

    def build_to_file(self, view: LeaderboardView, path: str | Path,
                      records: list[AffiliateRecord] | None = None) -> None:
        """Build the PPTX and write it to a file path."""
        Path(path).write_bytes(self.build(view, records))

    # ------------------------------------------------------------------
    # Renderers
    # ------------------------------------------------------------------

    def _render_title(self, slide) -> None:
        txbox = slide.shapes.add_textbox(Inches(0.5), Inches(0.3),
                                         Inches(SLIDE_WIDTH_IN - 1.0),
                                         Inches(0.8))
        run = txbox.text_frame.paragraphs[0].add_run()
        run.text = self.title
        run.font.name = self.design.primary_font
        run.font.size = Pt(self.design.title_size_pt)
        run.font.bold = True
        run.font.color.rgb = _hex_to_rgb(self.design.header_bg)

    def _render_empty_state(self, slide, view: LeaderboardView) -> None:
        """Render the empty-state title, message and reasons."""
        empty = view.empty_state
        txbox = slide.shapes.add_textbox(Inches(0.5), Inches(1.5),
                                         Inches(SLIDE_WIDTH_IN - 1.0),
                                         Inches(4.0))
        tf = txbox.text_frame
        tf.word_wrap = True

        lines = [empty.title, empty.message]
        if empty.reasons:
            lines.append("This could be due to:")
            lines.extend(f"• {reason}" for reason in empty.reasons)

        for idx, text in enumerate(lines):
            p = tf.paragraphs[0] if idx == 0 else tf.add_paragraph()
            run = p.add_run()
            run.text = text
            run.font.name = self.design.primary_font
            run.font.size = Pt(self.design.body_size_pt + (8 if idx == 0 else 0))
            run.font.bold = idx == 0

    def _render_table(self, slide, rows: list[LeaderboardRow],
                      width_in: float) -> None:
        """Render the ranked table, header row first."""
        table_shape = slide.shapes.add_table(
            len(rows) + 1, len(TABLE_COLUMNS),
            Inches(0.5), Inches(1.3),
            Inches(width_in), Inches(0.4 * (len(rows) + 1)),
        )
        table = table_shape.table

        for col_idx, (header, _, alignment) in enumerate(TABLE_COLUMNS):
            cell = table.cell(0, col_idx)
            cell.text = header
            self._style_cell(cell, alignment, is_header=True)

        for row_idx, row in enumerate(rows, start=1):
            for col_idx, (_, attr, alignment) in enumerate(TABLE_COLUMNS):
                cell = table.cell(row_idx, col_idx)
                cell.text = _cell_text(row, attr)
                fill = self.design.tier_color(row.tier) if attr == "rank" else None
                self._style_cell(cell, alignment, fill=fill)

    def _style_cell(self, cell, alignment: str, is_header: bool = False,
                    fill: str | None = None) -> None:
        """Apply font, alignment and background to a table cell."""
        cell.vertical_anchor = MSO_ANCHOR.MIDDLE
        for paragraph in cell.text_frame.paragraphs:
            paragraph.alignment = _ALIGN_MAP.get(alignment, PP_ALIGN.LEFT)
            for run in paragraph.runs:
                run.font.name = self.design.primary_font
                run.font.size = Pt(self.design.body_size_pt)
                run.font.bold = is_header
                color = self.design.white if is_header else self.design.dark_text
                run.font.color.rgb = _hex_to_rgb(color)

        background = self.design.header_bg if is_header else fill
        if background:
            cell.fill.solid()
            cell.fill.fore_color.rgb = _hex_to_rgb(background)


# ---------------------------------------------------------------------------
# Convenience function
# ---------------------------------------------------------------------------

def build_presentation(view: LeaderboardView,
                       records: list[AffiliateRecord] | None = None) -> bytes:
    """One-shot convenience: build a PPTX from a view."""
    return PPTXBuilder().build(view, records)
