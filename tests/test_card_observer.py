"""Tests for the card render observer."""

from lyricard.core.card_observer import CardInputs, CardRenderObserver, LoadState
from lyricard.core.color_extractor import FALLBACK_GRADIENT, make_gradient
from lyricard.core.models import LyricLine


class CountingRender:
    def __init__(self):
        self.calls = []

    def __call__(self, content):
        self.calls.append(content)
        return f"frame-{len(self.calls)}"


def _ready_inputs(**changes):
    inputs = CardInputs(
        lines=(LyricLine(1.0, "hello"),),
        title="Song",
        subtitle="Artist • Album",
        metadata_state=LoadState.LOADED,
        gradient=make_gradient((1, 2, 3), (4, 5, 6), (7, 8, 9)),
        gradient_state=LoadState.LOADED,
        avatar=b"img",
        avatar_state=LoadState.LOADED,
    )
    return inputs.with_(**changes)


class TestCardInputs:
    def test_pending_parts_are_not_ready(self):
        assert not CardInputs().is_ready()
        assert not _ready_inputs(gradient_state=LoadState.PENDING).is_ready()
        assert not _ready_inputs(avatar_state=LoadState.PENDING).is_ready()
        assert not _ready_inputs(metadata_state=LoadState.PENDING).is_ready()
        assert not _ready_inputs(lines=()).is_ready()

    def test_failures_are_terminal(self):
        inputs = _ready_inputs(gradient_state=LoadState.FAILED, avatar_state=LoadState.FAILED)

        assert inputs.is_ready()
        content = inputs.to_content()
        assert content.gradient == FALLBACK_GRADIENT
        assert content.avatar is None


class TestCardRenderObserver:
    def test_partial_inputs_keep_previous_frame(self):
        render = CountingRender()
        observer = CardRenderObserver(render)

        assert observer.update(_ready_inputs(avatar_state=LoadState.PENDING)) is False
        assert observer.frame is None
        assert render.calls == []

    def test_renders_once_per_change(self):
        render = CountingRender()
        observer = CardRenderObserver(render)
        inputs = _ready_inputs()

        assert observer.update(inputs) is True
        assert observer.update(inputs) is False
        assert observer.frame == "frame-1"

        assert observer.update(inputs.with_(lines=(LyricLine(2.0, "other"),))) is True
        assert observer.frame == "frame-2"

        # a pending update in between leaves the last frame alone
        assert observer.update(inputs.with_(gradient_state=LoadState.PENDING)) is False
        assert observer.frame == "frame-2"

    def test_reset(self):
        render = CountingRender()
        observer = CardRenderObserver(render)
        observer.update(_ready_inputs())
        observer.reset()

        assert observer.frame is None
        assert observer.update(_ready_inputs()) is True
        assert len(render.calls) == 2
