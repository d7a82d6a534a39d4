"""Background workers: every run ends with a `done` emission, even on failure."""

from unittest import mock

from lyricard.core.card_observer import LoadState
from lyricard.core.models import TrackInfo
from lyricard.ui.workers.loaders import CardSaveWorker, CoverColorWorker, LyricsLoadWorker

TRACK = TrackInfo(title="Song", artist="Artist", album="Album")


def _run(worker):
    emitted = []
    worker.done.connect(lambda *args: emitted.append(args))
    worker.run()
    return emitted


class TestLyricsLoadWorker:
    def test_loader_error_gives_empty_lines(self, qapp):
        loader = mock.Mock()
        loader.load.side_effect = RuntimeError("boom")

        assert _run(LyricsLoadWorker(3, TRACK, loader)) == [(3, [])]

    def test_lines_are_passed_through(self, qapp, sample_lines):
        loader = mock.Mock()
        loader.load.return_value = sample_lines

        assert _run(LyricsLoadWorker(1, TRACK, loader)) == [(1, sample_lines)]


class TestCoverColorWorker:
    def test_oversized_cover_fails_gradient_only(self, qapp, oversized_png):
        with mock.patch("lyricard.ui.workers.loaders.load_cover", return_value=oversized_png):
            [(gen, result)] = _run(CoverColorWorker(5, TRACK))

        assert gen == 5
        assert result.avatar_state is LoadState.LOADED
        assert result.gradient is None
        assert result.gradient_state is LoadState.FAILED

    def test_unexpected_error_fails_both(self, qapp):
        with mock.patch("lyricard.ui.workers.loaders.load_cover", side_effect=RuntimeError("boom")):
            [(gen, result)] = _run(CoverColorWorker(2, TRACK))

        assert gen == 2
        assert result.avatar_state is LoadState.FAILED
        assert result.gradient_state is LoadState.FAILED

    def test_palette_from_cover(self, qapp, make_png):
        with mock.patch("lyricard.ui.workers.loaders.load_cover", return_value=make_png(color=(255, 0, 0))):
            [(_, result)] = _run(CoverColorWorker(1, TRACK))

        assert result.gradient_state is LoadState.LOADED
        assert result.palette_class.name == "red"


class TestCardSaveWorker:
    def test_unexpected_render_error_reports_failure(self, qapp, tmp_path):
        worker = CardSaveWorker(mock.Mock(), mock.Mock(), 1.0, str(tmp_path), "card.png")

        with mock.patch("lyricard.ui.workers.loaders.render_card_png", side_effect=RuntimeError("no painter")):
            emitted = _run(worker)

        assert emitted == [(False, "Save failed: no painter")]
        assert list(tmp_path.iterdir()) == []
