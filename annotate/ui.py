"""
Full-screen annotations browser.

A Dialog around a selectable list; Enter on an entry opens a Yes/No
confirmation, and every user action is fed to the ListController as an event.
The controller's collection is saved back to the store when the window closes.
"""

from prompt_toolkit.application import Application
from prompt_toolkit.data_structures import Point
from prompt_toolkit.filters import Condition
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import (
    DynamicContainer,
    Float,
    FloatContainer,
    HSplit,
    Layout,
    Window,
    WindowAlign,
)
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.margins import ScrollbarMargin
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Button, Dialog, Label

from annotate.annotation import now_ms
from annotate.config import load_config
from annotate.log import debug
from annotate.session import (
    EMPTY_HINT,
    EMPTY_MESSAGE,
    ConfirmNo,
    ConfirmYes,
    ItemActivated,
    ListController,
    Mode,
    Quit,
)

PAGE_SIZE = 10

STYLE = Style.from_dict({
    "annotation-list.selected": "reverse",
})


class AnnotationList:
    """Focusable, scrollable list of controller rows with a selection bar."""

    def __init__(self, controller: ListController, on_activate, now=now_ms):
        self.controller = controller
        self.selected = 0
        self._on_activate = on_activate
        self._now = now

        kb = KeyBindings()

        @kb.add("up")
        def _up(event):
            self.move(-1)

        @kb.add("down")
        def _down(event):
            self.move(1)

        @kb.add("pageup")
        def _pageup(event):
            self.move(-PAGE_SIZE)

        @kb.add("pagedown")
        def _pagedown(event):
            self.move(PAGE_SIZE)

        @kb.add("home")
        def _home(event):
            self.selected = 0

        @kb.add("end")
        def _end(event):
            self.selected = max(len(self.controller.annotations) - 1, 0)

        @kb.add("enter")
        @kb.add(" ")
        def _activate(event):
            if not self.controller.is_empty:
                self._on_activate(self.selected)

        self.control = FormattedTextControl(
            self._get_text_fragments,
            key_bindings=kb,
            focusable=True,
            show_cursor=False,
            get_cursor_position=lambda: Point(x=0, y=self.selected),
        )
        self.window = Window(
            content=self.control,
            style="class:annotation-list",
            right_margins=[ScrollbarMargin(display_arrows=True)],
        )

    def move(self, delta: int):
        self.selected += delta
        self.clamp()

    def clamp(self):
        last = len(self.controller.annotations) - 1
        self.selected = max(0, min(self.selected, last))

    def _get_text_fragments(self):
        fragments = []
        for i, row in enumerate(self.controller.rows(self._now())):
            style = "class:annotation-list.selected" if i == self.selected else ""
            fragments.append((style, row))
            fragments.append(("", "\n"))
        if fragments:
            fragments.pop()
        return fragments

    def __pt_container__(self):
        return self.window


class AnnotationsView:
    """The interactive session's window, driving a ListController."""

    def __init__(
        self,
        controller: ListController,
        title: str = "Annotations",
        confirm_title: str = "Remove annotation",
        input=None,
        output=None,
        now=now_ms,
    ):
        self.controller = controller
        self.confirm_title = confirm_title
        self.list = AnnotationList(controller, self.activate, now=now)
        self.placeholder = HSplit([
            Label(EMPTY_MESSAGE),
            Window(FormattedTextControl(EMPTY_HINT), align=WindowAlign.CENTER, height=1),
        ])
        self.close_button = Button(text="Close", handler=self.quit)
        self.dialog = Dialog(
            title=title,
            body=DynamicContainer(self._body),
            buttons=[self.close_button],
            with_background=True,
        )
        self.root = FloatContainer(content=self.dialog, floats=[])
        self._confirm_float = None

        kb = KeyBindings()
        browsing = Condition(lambda: self.controller.mode is Mode.BROWSING)

        @kb.add("q", filter=browsing)
        @kb.add("c-c")
        def _quit(event):
            self.quit()

        @kb.add("escape", filter=~browsing)
        def _escape(event):
            self.cancel()

        self.app = Application(
            layout=Layout(self.root, focused_element=self._home_focus()),
            key_bindings=kb,
            style=STYLE,
            full_screen=True,
            input=input,
            output=output,
        )

    def _body(self):
        return self.placeholder if self.controller.is_empty else self.list

    def _home_focus(self):
        return self.close_button if self.controller.is_empty else self.list

    @property
    def confirming(self) -> bool:
        return self._confirm_float is not None

    def activate(self, index: int):
        """Ask whether to remove the entry at `index`."""
        self.controller.dispatch(ItemActivated(index))
        pending = self.controller.pending
        no_button = Button(text="No", handler=self.cancel)
        dialog = Dialog(
            title=self.confirm_title,
            body=Label(f"Remove this annotation?\n\n{pending.content}"),
            buttons=[Button(text="Yes", handler=self.confirm), no_button],
            modal=True,
        )
        self._confirm_float = Float(content=dialog)
        self.root.floats.append(self._confirm_float)
        self.app.layout.focus(no_button)

    def confirm(self):
        removed = self.controller.dispatch(ConfirmYes())
        self._close_confirm()
        self.list.clamp()
        return removed

    def cancel(self):
        self.controller.dispatch(ConfirmNo())
        self._close_confirm()

    def quit(self):
        if self.controller.closed:
            return
        self.controller.dispatch(Quit())
        self._close_confirm()
        if self.app.is_running:
            self.app.exit()

    def _close_confirm(self):
        if self._confirm_float is None:
            return
        self.root.floats.remove(self._confirm_float)
        self._confirm_float = None
        self.app.layout.focus(self._home_focus())

    def run(self):
        self.app.run()
        if not self.controller.closed:
            self.controller.dispatch(Quit())


def run_session(store, config: dict | None = None, input=None, output=None) -> ListController:
    """Browse the store interactively, then persist what is left.

    `input` and `output` default to the terminal.
    """
    if config is None:
        config = load_config()
    ui_config = config.get("ui", {})

    controller = ListController(store.load(), age_width=ui_config.get("age_width", 14))
    # Fails with FutureTimestampError before the screen is taken over.
    controller.rows()

    view = AnnotationsView(
        controller,
        title=ui_config.get("title", "Annotations"),
        confirm_title=ui_config.get("confirm_title", "Remove annotation"),
        input=input,
        output=output,
    )
    view.run()

    debug(f"session closed with {len(controller.annotations)} annotations")
    store.save(controller.annotations)
    return controller
