"""Tests for text rendering."""

from blockfall_core.game import Game
from blockfall_core.render import render_text
from blockfall_core.rng import SequenceShapeProvider
from blockfall_core.shape import get_shape


def test_render_empty_running_game():
    """Test an empty board draws as dots without a banner."""
    game = Game()
    game.start()

    lines = render_text(game.snapshot()).split("\n")

    assert len(lines) == 20
    assert all(line == "." * 10 for line in lines)


def test_render_piece_and_locked_cells():
    """Test locked cells and the active piece are both drawn."""
    game = Game(provider=SequenceShapeProvider([get_shape("tee")]))
    game.start()
    game.grid.set(19, 0, 1)
    game.advance()

    lines = render_text(game.snapshot()).split("\n")

    assert lines[0] == "....T....."
    assert lines[1] == "...TTT...."
    assert lines[19] == "I........."


def test_render_phase_banner():
    """Test the phase name is shown when the game is not running."""
    game = Game()
    game.start()
    game.toggle_pause()

    text = render_text(game.snapshot(), empty=" ", glyphs={})

    assert text.endswith("[paused]")
    assert render_text(Game().snapshot()).endswith("[not_started]")
