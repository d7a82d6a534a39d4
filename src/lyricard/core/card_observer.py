# core/card_observer.py
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Callable, Generic, Optional, Tuple, TypeVar

from lyricard.core.card_compositor import CardContent
from lyricard.core.color_extractor import FALLBACK_GRADIENT
from lyricard.core.models import BackgroundGradient, LyricLine

T = TypeVar("T")


class LoadState(Enum):
    PENDING = auto()
    LOADED = auto()
    FAILED = auto()

    @property
    def terminal(self) -> bool:
        return self is not LoadState.PENDING


@dataclass(frozen=True)
class CardInputs:
    """Everything the card depends on, with the load state of async parts."""
    lines: Tuple[LyricLine, ...] = ()
    title: str = ""
    subtitle: str = ""
    metadata_state: LoadState = LoadState.PENDING
    gradient: Optional[BackgroundGradient] = None
    gradient_state: LoadState = LoadState.PENDING
    avatar: Optional[bytes] = None
    avatar_state: LoadState = LoadState.PENDING

    def is_ready(self) -> bool:
        return (
            bool(self.lines)
            and self.metadata_state.terminal
            and self.gradient_state.terminal
            and self.avatar_state.terminal
        )

    def with_(self, **changes) -> "CardInputs":
        return replace(self, **changes)

    def to_content(self) -> CardContent:
        gradient = self.gradient if self.gradient_state is LoadState.LOADED and self.gradient else FALLBACK_GRADIENT
        avatar = self.avatar if self.avatar_state is LoadState.LOADED else None
        return CardContent(
            lines=tuple(self.lines),
            title=self.title,
            subtitle=self.subtitle,
            gradient=gradient,
            avatar=avatar,
        )


class CardRenderObserver(Generic[T]):
    """
    Re-runs a pure `CardContent -> frame` function when the inputs change.

    Partial inputs are never rendered; the previous frame stays current.
    """

    def __init__(self, render: Callable[[CardContent], T]):
        self._render = render
        self._last_content: Optional[CardContent] = None
        self.frame: Optional[T] = None

    def update(self, inputs: CardInputs) -> bool:
        """Returns True when a new frame was produced."""
        if not inputs.is_ready():
            return False

        content = inputs.to_content()
        if content == self._last_content:
            return False

        self.frame = self._render(content)
        self._last_content = content
        return True

    def reset(self) -> None:
        self._last_content = None
        self.frame = None
