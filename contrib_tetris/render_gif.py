"""Raster preview of a single run as a looping GIF."""

from PIL import Image, ImageDraw

from .grid import ActivityGrid
from .render_svg import LEVEL_COLOR
from .schedule import Run

CELL = 10
GAP = 3
PAD_X = 18
PAD_Y = 14
STRIDE = CELL + GAP

# GIFs aren't truly transparent everywhere, so use a near-GitHub-dark background.
BG = (13, 17, 23)


def hex_to_rgb(h):
    h = h.lstrip("#")
    return tuple(int(h[i:i+2], 16) for i in (0, 2, 4))


def _cell_box(x, y, shift_y=0.0):
    px = PAD_X + x * STRIDE
    py = PAD_Y + y * STRIDE + shift_y
    return [px, py, px + CELL, py + CELL]


def _base(grid: ActivityGrid):
    grid_w = grid.width * STRIDE - GAP
    grid_h = grid.height * STRIDE - GAP
    base = Image.new("RGBA", (PAD_X * 2 + grid_w, PAD_Y * 2 + grid_h), BG + (255,))
    d = ImageDraw.Draw(base)
    empty = hex_to_rgb(LEVEL_COLOR[0])
    for x in range(grid.width):
        for y in range(grid.height):
            d.rounded_rectangle(_cell_box(x, y), radius=2, fill=empty)
    return base, (PAD_X, PAD_Y, PAD_X + grid_w, PAD_Y + grid_h)


def render_frame(grid: ActivityGrid, run: Run, t: float, base=None):
    """Draw the state of ``run`` at absolute time ``t``."""
    if base is None:
        base = _base(grid)
    image, well = base
    frame = image.copy()
    layer = Image.new("RGBA", frame.size, (0, 0, 0, 0))
    d = ImageDraw.Draw(layer)

    for entry in run.entries:
        if t < entry.begin:
            continue
        progress = min(1.0, (t - entry.begin) / entry.duration) if entry.duration > 0 else 1.0
        shift_y = (entry.source[1] - entry.destination[1]) * STRIDE * (1.0 - progress)
        for x, y in entry.placement.cells:
            fill = hex_to_rgb(LEVEL_COLOR[grid.level(x, y)])
            d.rounded_rectangle(_cell_box(x, y, shift_y), radius=2, fill=fill)

    # only what is inside the well shows
    frame.alpha_composite(layer, dest=well[:2], source=well)
    return frame


def render_gif(grid: ActivityGrid, run: Run, out, frames: int = 48, frame_ms: int = 90):
    """Save ``frames`` evenly spaced snapshots of ``run`` to ``out`` (path or file)."""
    frames = max(2, frames)
    base = _base(grid)
    images = []
    for i in range(frames):
        t = run.start + run.duration * i / (frames - 1)
        frame = render_frame(grid, run, t, base)
        images.append(frame.convert("RGB").convert("P", palette=Image.Palette.ADAPTIVE))

    images[0].save(
        out,
        format="GIF",
        save_all=True,
        append_images=images[1:],
        duration=frame_ms,
        loop=0,
        optimize=True,
    )
    return len(images)
