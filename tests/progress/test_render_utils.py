"""Tests for rendering helpers and the terminal renderer."""

import pytest

from ocr.progress.render_utils import (
    BAR_WIDTH,
    TerminalRenderer,
    format_duration,
    percent_of,
    plain,
    render_empty_bar,
    render_progress_bar,
    round_half_up,
)


class TestRounding:
    def test_half_rounds_up(self) -> None:
        assert round_half_up(12.5) == 13
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4) == 2

    @pytest.mark.parametrize(
        ("current", "total", "expected"),
        [(1, 8, 13), (1, 6, 17), (4, 8, 50), (8, 8, 100), (0, 8, 0), (3, 0, 0), (9, 8, 100)],
    )
    def test_percent_of(self, current: int, total: int, expected: int) -> None:
        assert percent_of(current, total) == expected


class TestFormatDuration:
    @pytest.mark.parametrize(
        ("ms", "expected"),
        [
            (0, "0s"),
            (999, "0s"),
            (5_000, "5s"),
            (65_000, "1m 5s"),
            (3_723_000, "1h 2m 3s"),
            (-5_000, "0s"),
        ],
    )
    def test_formats(self, ms: int, expected: str) -> None:
        assert format_duration(ms) == expected


class TestProgressBar:
    def test_partial_bar(self) -> None:
        bar = plain(render_progress_bar(1, 8, "Context Discovery"))
        assert bar == "━━━" + "─" * (BAR_WIDTH - 3) + "  13% · Context Discovery"

    def test_without_label(self) -> None:
        assert plain(render_progress_bar(8, 8)) == "━" * BAR_WIDTH + "  100%"

    def test_empty_bar(self) -> None:
        assert plain(render_empty_bar()) == "─" * BAR_WIDTH + "  0%"

    def test_custom_width(self) -> None:
        assert plain(render_progress_bar(1, 2, width=10)).startswith("━━━━━─────")


class TestTerminalRenderer:
    def test_first_frame_clears(self, renderer: TerminalRenderer) -> None:
        _, needs_clear = renderer.prepare("review-waiting", ["a"])
        assert needs_clear
        assert renderer.clear_count == 1

    def test_same_kind_updates_in_place(self, renderer: TerminalRenderer) -> None:
        renderer.prepare("review-progress", ["a"])
        _, needs_clear = renderer.prepare("review-progress", ["b"])
        assert not needs_clear
        assert renderer.clear_count == 1

    def test_kind_switch_clears(self, renderer: TerminalRenderer) -> None:
        renderer.prepare("review-waiting", ["a"])
        _, needs_clear = renderer.prepare("review-progress", ["b"])
        assert needs_clear
        assert renderer.clear_count == 2

    def test_shorter_frame_is_padded(self, renderer: TerminalRenderer) -> None:
        renderer.prepare("review-progress", ["1", "2", "3", "4"])
        padded, _ = renderer.prepare("review-progress", ["1", "2"])

        assert padded == ["1", "2", "", ""]
        assert renderer.last_line_count == 4

    def test_kind_switch_is_not_padded(self, renderer: TerminalRenderer) -> None:
        renderer.prepare("review-progress", ["1", "2", "3", "4"])
        padded, needs_clear = renderer.prepare("generic-waiting", ["1", "2"])

        assert needs_clear
        assert padded == ["1", "2"]
        assert renderer.last_line_count == 2

    def test_longer_frame_grows(self, renderer: TerminalRenderer) -> None:
        renderer.prepare("review-progress", ["1"])
        padded, _ = renderer.prepare("review-progress", ["1", "2", "3"])
        assert padded == ["1", "2", "3"]

    def test_reset_forgets_previous_frame(self, renderer: TerminalRenderer) -> None:
        renderer.prepare("review-progress", ["1", "2"])
        renderer.reset()

        assert renderer.last_render_type is None
        assert renderer.last_line_count == 0
        _, needs_clear = renderer.prepare("review-progress", ["1"])
        assert needs_clear

    def test_done_leaves_last_frame(self, renderer: TerminalRenderer) -> None:
        renderer.show("review-waiting", ["[ocr.dim]first[/]"])
        renderer.show("review-progress", ["[ocr.title]second frame[/]"])
        renderer.done()

        output = renderer.console.file.getvalue()
        assert "second frame" in output
        assert renderer.last_render_type == "review-progress"
