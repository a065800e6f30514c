from __future__ import annotations

from unittest.mock import Mock, patch

from xlsx_export.services.progress import ProgressTracker, is_tty_enabled


def test_is_tty_enabled_returns_stdout_isatty():
    with patch("sys.stdout.isatty", return_value=True):
        assert is_tty_enabled() is True

    with patch("sys.stdout.isatty", return_value=False):
        assert is_tty_enabled() is False


class TestProgressTracker:
    """Test cases for ProgressTracker class."""

    def test_init_with_tty_enabled(self):
        with patch("xlsx_export.services.progress.is_tty_enabled", return_value=True), \
             patch("xlsx_export.services.progress.tqdm") as mock_tqdm:

            tracker = ProgressTracker(4, description="Loading")

            assert tracker.total_sheets == 4
            assert tracker.current_sheet == 0
            assert tracker.enabled is True
            mock_tqdm.assert_called_once_with(
                total=4,
                desc="Loading",
                unit="sheet",
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )

    def test_init_with_tty_disabled(self):
        with patch("xlsx_export.services.progress.is_tty_enabled", return_value=False):
            tracker = ProgressTracker(4)

            assert tracker.enabled is False
            assert tracker.pbar is None
            assert tracker.description == "Loading sheets"

    def test_sheet_updates_with_tty_enabled(self):
        mock_pbar = Mock()

        with patch("xlsx_export.services.progress.is_tty_enabled", return_value=True), \
             patch("xlsx_export.services.progress.tqdm", return_value=mock_pbar):

            tracker = ProgressTracker(2, description="Loading")
            tracker.start_sheet("orders")
            mock_pbar.set_description.assert_called_with("Loading (orders)")

            tracker.finish_sheet(rows=10)
            mock_pbar.update.assert_called_once_with(1)
            mock_pbar.set_description.assert_called_with("Loading")
            mock_pbar.set_postfix.assert_called_once_with(rows=10)

            assert tracker.current_sheet == 1
            assert tracker.rows == 10

    def test_sheet_updates_with_tty_disabled(self):
        with patch("xlsx_export.services.progress.is_tty_enabled", return_value=False):
            tracker = ProgressTracker(2)
            tracker.start_sheet("a")
            tracker.finish_sheet(rows=3)
            tracker.start_sheet("b")
            tracker.finish_sheet(rows=4)

            assert tracker.current_sheet == 2
            assert tracker.rows == 7

    def test_context_manager_closes_bar(self):
        mock_pbar = Mock()

        with patch("xlsx_export.services.progress.is_tty_enabled", return_value=True), \
             patch("xlsx_export.services.progress.tqdm", return_value=mock_pbar):

            with ProgressTracker(1) as tracker:
                assert tracker.pbar is mock_pbar

            mock_pbar.close.assert_called_once()
            assert tracker.pbar is None
