"""Animated SVG: a static empty well with tetrominoes dropping into it.

Geometry: cell (x, y) has its top-left corner at
``(grid_x0 + x * stride, grid_y0 + y * stride)`` where
``stride = cell + gap``. The falling overlay is clipped to the well.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import svgwrite

from .grid import ActivityGrid, month_labels
from .schedule import Run, cycle_duration

# GitHub-like greens on dark
LEVEL_COLOR = ["#0b1224", "#0e4429", "#006d32", "#26a641", "#39d353"]
STROKE = "#0f172a"
LABEL = "#9ca3af"
TEXT = "#e5e7eb"
FONT = "ui-sans-serif, system-ui"

MERGE_MARKERS = ("<<<<<<<", "=======", ">>>>>>>")


class RenderError(ValueError):
    pass


@dataclass(frozen=True)
class Layout:
    cell: int = 12
    gap: int = 2
    pad: int = 16
    left_label_w: int = 34  # Mon/Wed/Fri
    top_label_h: int = 22   # month names
    hud_h: int = 46         # stats + legend
    intrinsic_w: int = 900

    @property
    def stride(self) -> int:
        return self.cell + self.gap

    @property
    def grid_x0(self) -> int:
        return self.pad + self.left_label_w

    @property
    def grid_y0(self) -> int:
        return self.pad + self.top_label_h

    def cell_origin(self, x: int, y: int) -> Tuple[int, int]:
        return self.grid_x0 + x * self.stride, self.grid_y0 + y * self.stride

    def well_size(self, grid: ActivityGrid) -> Tuple[int, int]:
        return grid.width * self.stride - self.gap, grid.height * self.stride - self.gap

    def doc_size(self, grid: ActivityGrid) -> Tuple[int, int]:
        well_w, well_h = self.well_size(grid)
        return (self.pad * 2 + self.left_label_w + well_w,
                self.pad * 2 + self.top_label_h + well_h + self.hud_h)


def check_integrity(doc: str) -> str:
    for marker in MERGE_MARKERS:
        if marker in doc:
            raise RenderError(f"SVG contains merge marker {marker!r}")
    return doc


def _frac(t: float, cycle: float) -> str:
    return f"{min(1.0, max(0.0, t / cycle)):.4f}"


def _tile(dwg, layout, x, y, fill):
    return dwg.rect(insert=layout.cell_origin(x, y), size=(layout.cell, layout.cell),
                    rx=3, fill=fill, stroke=STROKE, stroke_width=1)


def _labels(dwg, grid, layout):
    for x, label in month_labels(grid):
        dwg.add(dwg.text(label, insert=(layout.cell_origin(x, 0)[0], layout.pad + 14),
                         fill=LABEL, font_family=FONT, font_size=11))
    for name, row in (("Mon", 1), ("Wed", 3), ("Fri", 5)):
        if row >= grid.height:
            continue
        y = layout.cell_origin(0, row)[1] + layout.cell - 2
        dwg.add(dwg.text(name, insert=(layout.grid_x0 - 6, y), fill=LABEL,
                         font_family=FONT, font_size=11, text_anchor="end"))


def _hud(dwg, grid, layout):
    well_w, well_h = layout.well_size(grid)
    legend_y = layout.grid_y0 + well_h + 26
    right = layout.grid_x0 + well_w

    stats = (f"{grid.total} contributions in the last year • "
             f"7d: {grid.recent_total(7)} • 30d: {grid.recent_total(30)}")
    dwg.add(dwg.text(stats, insert=(layout.grid_x0, legend_y + 2), fill=TEXT,
                     font_family=FONT, font_size=11))

    step = layout.cell + 4
    dwg.add(dwg.text("Less", insert=(right - 5 * step - 2, legend_y + 2), fill=LABEL,
                     font_family=FONT, font_size=11, text_anchor="end"))
    for lvl, color in enumerate(LEVEL_COLOR):
        dwg.add(dwg.rect(insert=(right - (5 - lvl) * step + 10, legend_y - 10),
                         size=(layout.cell, layout.cell), rx=3, fill=color,
                         stroke=STROKE, stroke_width=1))
    dwg.add(dwg.text("More", insert=(right + 2, legend_y + 2), fill=LABEL,
                     font_family=FONT, font_size=11))


def _drop(dwg, grid, layout, entry, run, cycle):
    """One falling piece: hidden until its drop, visible until its run ends."""
    sx, sy = entry.source
    dx, dy = entry.destination
    shift_x = (sx - dx) * layout.stride
    shift_y = (sy - dy) * layout.stride

    g = dwg.g(opacity=0)
    b, land, gone = _frac(entry.begin, cycle), _frac(entry.end, cycle), _frac(run.end, cycle)
    g.add(dwg.animate(attributeName="opacity", values=["0", "1", "0"],
                      keyTimes=f"0;{b};{gone}", calcMode="discrete",
                      dur=f"{cycle:.2f}s", repeatCount="indefinite"))
    start = f"{shift_x} {shift_y}"
    g.add(dwg.animateTransform("translate", "transform",
                               values=[start, start, "0 0", "0 0"],
                               keyTimes=f"0;{b};{land};1",
                               dur=f"{cycle:.2f}s", repeatCount="indefinite"))
    for x, y in entry.placement.cells:
        g.add(_tile(dwg, layout, x, y, LEVEL_COLOR[grid.level(x, y)]))
    return g


def _flash(dwg, layout, well_size, run, cycle):
    """Soft white pulse over the well while the finished wall is held."""
    landed = min(run.end, max(e.end for e in run.entries))
    mid = (landed + run.end) / 2
    rect = dwg.rect(insert=(layout.grid_x0, layout.grid_y0), size=well_size, rx=10,
                    fill="#ffffff", opacity=0)
    rect.add(dwg.animate(attributeName="opacity", values=["0", "0", "0.28", "0", "0"],
                         keyTimes=f"0;{_frac(landed, cycle)};{_frac(mid, cycle)};{_frac(run.end, cycle)};1",
                         dur=f"{cycle:.2f}s", repeatCount="indefinite"))
    return rect


def render_svg(grid: ActivityGrid, runs: Sequence[Run], layout: Layout = Layout(),
               title: Optional[str] = None) -> str:
    width, height = layout.doc_size(grid)
    well_w, well_h = layout.well_size(grid)
    intrinsic_h = round(height / width * layout.intrinsic_w)

    dwg = svgwrite.Drawing(size=(layout.intrinsic_w, intrinsic_h), profile="full", debug=False)
    dwg["viewBox"] = f"0 0 {width} {height}"
    dwg["preserveAspectRatio"] = "xMidYMid meet"
    if title:
        dwg.set_desc(title=title)

    grad = dwg.defs.add(dwg.linearGradient(start=(0, 0), end=(1, 1), id="bgGrad"))
    grad.add_stop_color(0, "#070a14")
    grad.add_stop_color(1, "#0b1020")
    clip = dwg.defs.add(dwg.clipPath(id="well"))
    clip.add(dwg.rect(insert=(layout.grid_x0, layout.grid_y0), size=(well_w, well_h)))

    dwg.add(dwg.rect(insert=(0, 0), size=(width, height), fill="url(#bgGrad)"))
    _labels(dwg, grid, layout)

    background = dwg.add(dwg.g(id="background"))
    for y in range(grid.height):
        for x in range(grid.width):
            background.add(_tile(dwg, layout, x, y, LEVEL_COLOR[0]))

    overlay = dwg.add(dwg.g(id="overlay", clip_path="url(#well)"))
    flash = dwg.add(dwg.g(id="flash", clip_path="url(#well)"))
    cycle = cycle_duration(runs)
    if cycle > 0:
        for run in runs:
            for entry in run.entries:
                overlay.add(_drop(dwg, grid, layout, entry, run, cycle))
            if run.entries:
                flash.add(_flash(dwg, layout, (well_w, well_h), run, cycle))

    _hud(dwg, grid, layout)
    return check_integrity(dwg.tostring())
