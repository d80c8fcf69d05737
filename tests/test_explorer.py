import argparse
import io
import logging

import pytest

import frct_explorer
from frct_config import ANSI, ExplorerConfig, reload_config
from frct_explorer import Explorer, main, parse_size
from frct_kernel import FractalVariant
from frct_render import FrameScheduler
from frct_terminal import FrameSink, KeyEvent, ResizeEvent
from frct_viewport import DEFAULT_VIEWPORT, ExplorerState


class ScriptedEvents:
    def __init__(self, events):
        self.events = list(events)

    def read(self):
        return self.events.pop(0)


@pytest.fixture
def explorer():
    stream = io.BytesIO()
    state = ExplorerState(max_iterations=20, variant_index=0, iteration_step=10, min_iterations=10)
    with FrameScheduler(max_workers=1) as scheduler:
        yield Explorer(state, scheduler, FrameSink(stream), size_provider=lambda: (4, 2))


def test_quit_stops_the_loop(explorer):
    assert explorer.handle(KeyEvent("q")) is False
    assert explorer.sink.frames_written == 0


def test_pan_redraws(explorer):
    assert explorer.handle(KeyEvent("w")) is True
    assert explorer.sink.frames_written == 1
    assert explorer.state.viewport == DEFAULT_VIEWPORT.pan_up()
    assert explorer.last_size == (4, 2)
    output = explorer.sink.stream.getvalue().decode("utf-8")
    assert output.startswith(ANSI.CURSOR_HOME)
    assert output.endswith(ANSI.RESET)


def test_zoom_keys(explorer):
    explorer.handle(KeyEvent("UP"))
    assert explorer.state.viewport == DEFAULT_VIEWPORT.zoom_in()
    explorer.handle(KeyEvent("DOWN"))
    assert explorer.state.viewport == DEFAULT_VIEWPORT.zoom_in().zoom_out()
    assert explorer.sink.frames_written == 2


def test_unbound_key_is_ignored(explorer):
    assert explorer.handle(KeyEvent("x")) is True
    assert explorer.sink.frames_written == 0


def test_no_redraw_when_nothing_changes(explorer):
    explorer.handle(KeyEvent("-"))
    assert explorer.state.max_iterations == 10
    assert explorer.sink.frames_written == 1
    explorer.handle(KeyEvent("-"))
    assert explorer.state.max_iterations == 10
    assert explorer.sink.frames_written == 1
    explorer.handle(KeyEvent("r"))
    assert explorer.sink.frames_written == 1


def test_enter_forces_redraw(explorer):
    explorer.handle(KeyEvent("ENTER"))
    explorer.handle(KeyEvent("ENTER"))
    assert explorer.sink.frames_written == 2


def test_fractal_cycling_keys(explorer):
    explorer.handle(KeyEvent("["))
    assert explorer.state.variant is FractalVariant.JULIA
    explorer.handle(KeyEvent("]"))
    assert explorer.state.variant is FractalVariant.MANDELBROT


def test_resize_redraws_only_on_new_size(explorer):
    explorer.redraw()
    written = explorer.sink.frames_written
    explorer.handle(ResizeEvent(4, 2))
    assert explorer.sink.frames_written == written
    explorer.handle(ResizeEvent(6, 3))
    assert explorer.sink.frames_written == written + 1
    assert ANSI.CLEAR_SCREEN.encode() in explorer.sink.stream.getvalue()


def test_run_draws_first_frame_then_follows_events(explorer):
    explorer.run(ScriptedEvents([KeyEvent("ENTER"), KeyEvent("]"), KeyEvent("q")]))
    assert explorer.sink.frames_written == 3
    assert explorer.state.variant is FractalVariant.BURNING_SHIP


def test_snapshot_key_saves_without_redraw(explorer, monkeypatch, tmp_path):
    calls = []

    def fake_save(columns, rows, viewport, max_iterations, variant):
        calls.append((columns, rows, viewport, max_iterations, variant))
        return tmp_path / "shot.png"

    monkeypatch.setattr(frct_explorer, "save_snapshot", fake_save)
    explorer.handle(KeyEvent("p"))
    assert calls == [(4, 2, DEFAULT_VIEWPORT, 20, FractalVariant.MANDELBROT)]
    assert explorer.snapshots == [tmp_path / "shot.png"]
    assert explorer.sink.frames_written == 0


def test_failed_snapshot_keeps_session_running(explorer, tmp_path, caplog):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    assert reload_config(ExplorerConfig(snapshot_dir=str(blocker / "shots"))) is True
    try:
        with caplog.at_level(logging.ERROR, logger="FRCT.Explorer"):
            assert explorer.handle(KeyEvent("p")) is True
        assert explorer.snapshots == []
        assert explorer.sink.frames_written == 0
        assert "Snapshot failed" in caplog.text

        # The loop still accepts input afterwards
        assert explorer.handle(KeyEvent("ENTER")) is True
        assert explorer.sink.frames_written == 1
    finally:
        reload_config()


def test_sink_failure_propagates(explorer):
    class BrokenStream(io.BytesIO):
        def flush(self):
            raise OSError("display gone")

    explorer.sink = FrameSink(BrokenStream())
    with pytest.raises(OSError, match="display gone"):
        explorer.handle(KeyEvent("ENTER"))


def test_parse_size():
    assert parse_size("80x24") == (80, 24)
    assert parse_size(" 4X2 ") == (4, 2)
    for bad in ("80", "0x10", "axb", "-3x4"):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_size(bad)


def test_main_prints_one_frame(capsysbinary):
    assert main(["--print", "--size", "4x2", "--fractal", "julia", "--iterations", "30"]) == 0
    out = capsysbinary.readouterr().out
    assert out.startswith(b"\x1b[1;1H")
    assert out.endswith(b"\x1b[0m\n")


def test_main_writes_snapshot(tmp_path):
    target = tmp_path / "frame.png"
    assert main(["--snapshot", str(target), "--size", "4x2"]) == 0
    assert target.exists()
