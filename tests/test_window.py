"""
Window drawing decisions, checked against a stand-in object so no arcade
window (and no display) is ever opened.
"""
from types import SimpleNamespace

import pytest

from game.survival.session import GamePhase

try:
    from game.survival.window import SurvivalWindow
except Exception as exc:  # arcade needs a usable graphics backend to import
    pytest.skip(f"arcade unavailable: {exc}", allow_module_level=True)


def draw(session, frame=None):
    drawn = []
    stub = SimpleNamespace(
        session=session,
        _frame=frame,
        clear=lambda: None,
        _draw_menu=lambda: drawn.append("menu"),
    )
    SurvivalWindow.on_draw(stub)
    return drawn


class TestOnDraw:

    def test_idle_draws_menu(self, session):
        assert session.phase is GamePhase.IDLE
        assert draw(session) == ["menu"]

    def test_started_without_frame_draws_empty_arena(self, running):
        assert running.phase is GamePhase.RUNNING
        assert draw(running) == []
