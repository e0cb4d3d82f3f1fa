"""Immutable text style frames and the stack that scopes them."""

from pydantic import BaseModel, ConfigDict


class TextStyle(BaseModel):
    """Fully resolved style of one rendering scope."""

    model_config = ConfigDict(frozen=True)

    font: str
    font_size: float
    fill_color: str
    left_margin: float
    line_gap: float = 0


class StyleStack:
    """Stack of TextStyle frames on top of a base style.

    A pushed frame inherits every field it does not set from the frame below.
    left_margin is an increment added to the parent margin so indents nest.
    """

    def __init__(self, base: TextStyle):
        self.base = base
        self._frames: list[TextStyle] = []

    @property
    def current(self) -> TextStyle:
        return self._frames[-1] if self._frames else self.base

    @property
    def depth(self) -> int:
        return len(self._frames)

    def push(self, **overrides) -> TextStyle:
        parent = self.current
        margin = parent.left_margin + overrides.pop("left_margin", 0)
        frame = parent.model_copy(update={**overrides, "left_margin": margin})
        self._frames.append(frame)
        return frame

    def pop(self) -> TextStyle:
        if not self._frames:
            raise IndexError("pop from empty style stack")
        self._frames.pop()
        return self.current

    def reset(self) -> TextStyle:
        self._frames.clear()
        return self.base
