from dataclasses import dataclass
from enum import Enum

from annotate.annotation import Annotation, now_ms
from annotate.errors import SessionStateError
from annotate.log import debug

EMPTY_MESSAGE = "You have not registered any annotation!"
EMPTY_HINT = "Try: annotate [text]"


class Mode(Enum):
    BROWSING = "browsing"
    CONFIRMING_DELETE = "confirming_delete"


# --- Events ---

@dataclass(frozen=True)
class ItemActivated:
    index: int


@dataclass(frozen=True)
class ConfirmYes:
    pass


@dataclass(frozen=True)
class ConfirmNo:
    pass


@dataclass(frozen=True)
class Quit:
    pass


class ListController:
    """Owns the in-memory collection for one interactive session.

    Browsing -> (activate) -> Confirming delete -> (yes/no) -> Browsing.
    Quit ends the session from either mode. The displayed rows are always
    rendered from the same list that deletions mutate, so a displayed index
    is a collection index.
    """

    def __init__(self, annotations: list[Annotation], age_width: int = 14):
        self._annotations = list(annotations)
        self.age_width = age_width
        self.mode = Mode.BROWSING
        self.pending_index: int | None = None
        self.closed = False

    @property
    def annotations(self) -> list[Annotation]:
        """The authoritative collection, to be saved when the session ends."""
        return self._annotations

    @property
    def is_empty(self) -> bool:
        return not self._annotations

    @property
    def pending(self) -> Annotation | None:
        if self.pending_index is None:
            return None
        return self._annotations[self.pending_index]

    def rows(self, now: int | None = None) -> list[str]:
        """One display line per annotation: right-aligned age, then content."""
        if now is None:
            now = now_ms()
        return [self.format_row(a, now) for a in self._annotations]

    def format_row(self, annotation: Annotation, now: int | None = None) -> str:
        age = annotation.format_relative_age(now)
        return f"{age:>{self.age_width}} | {annotation.content}"

    # --- Transitions ---

    def on_activate(self, index: int):
        self._require(Mode.BROWSING, "activate an entry")
        if not 0 <= index < len(self._annotations):
            raise IndexError(f"No annotation at index {index}")
        self.pending_index = index
        self.mode = Mode.CONFIRMING_DELETE

    def on_confirm_delete(self) -> Annotation:
        self._require(Mode.CONFIRMING_DELETE, "confirm a deletion")
        removed = self._annotations.pop(self.pending_index)
        debug(f"removed {removed}")
        self.pending_index = None
        self.mode = Mode.BROWSING
        return removed

    def on_cancel(self):
        self._require(Mode.CONFIRMING_DELETE, "cancel a deletion")
        self.pending_index = None
        self.mode = Mode.BROWSING

    def on_quit(self):
        if self.closed:
            raise SessionStateError("Session is already closed")
        self.pending_index = None
        self.mode = Mode.BROWSING
        self.closed = True

    def dispatch(self, event):
        """Apply one UI event. Returns the removed annotation for ConfirmYes."""
        if isinstance(event, ItemActivated):
            return self.on_activate(event.index)
        if isinstance(event, ConfirmYes):
            return self.on_confirm_delete()
        if isinstance(event, ConfirmNo):
            return self.on_cancel()
        if isinstance(event, Quit):
            return self.on_quit()
        raise TypeError(f"Unknown event: {event!r}")

    def _require(self, mode: Mode, action: str):
        if self.closed:
            raise SessionStateError(f"Cannot {action}: session is closed")
        if self.mode is not mode:
            raise SessionStateError(f"Cannot {action} while {self.mode.value}")
