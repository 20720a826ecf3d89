"""Plain-text rendering of a game snapshot."""

from typing import Mapping, Optional

from blockfall_core.game import GamePhase, Snapshot

# Glyph per color id; ids without an entry are drawn as their digit
DEFAULT_GLYPHS = {1: "I", 2: "O", 3: "S", 4: "T"}


def render_text(
    snapshot: Snapshot,
    empty: str = ".",
    glyphs: Optional[Mapping[int, str]] = None,
) -> str:
    """Draw a snapshot as lines of characters.

    Locked cells and the active piece share the same glyphs. When the game is
    not running a banner with the phase name is appended below the grid.

    Args:
        snapshot: Snapshot to draw
        empty: Character for empty cells
        glyphs: Mapping from color id to character

    Returns:
        Multi-line string, one line per grid row
    """
    if glyphs is None:
        glyphs = DEFAULT_GLYPHS

    canvas = [list(row) for row in snapshot.cells]
    if snapshot.piece is not None:
        piece = snapshot.piece
        for r, c, value in piece.shape.cells():
            row = piece.row + r
            col = piece.col + c
            if 0 <= row < snapshot.rows and 0 <= col < snapshot.cols:
                canvas[row][col] = value

    lines = [
        "".join(glyphs.get(v, str(v)) if v else empty for v in row)
        for row in canvas
    ]
    if snapshot.phase is not GamePhase.RUNNING:
        lines.append(f"[{snapshot.phase.value}]")
    return "\n".join(lines)
