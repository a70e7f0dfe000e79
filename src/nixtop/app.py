"""nixtop - Textual viewer."""

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Footer, Static

from nixtop.display import FrameSource


class NixTopApp(App):
    """Full-screen viewer that refreshes the build summary on a timer."""

    TITLE = "nixtop"
    SUB_TITLE = "Nix build processes"

    CSS = """
    #summary {
        dock: top;
        height: 1;
        background: $surface;
        text-style: bold;
    }

    #frame-scroll {
        height: 1fr;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "refresh_frame", "Refresh"),
    ]

    def __init__(self, frame_source: FrameSource, delay: float = 0.25) -> None:
        """Initialize the NixTopApp."""
        super().__init__()
        self._frame_source = frame_source
        self._delay = max(delay, 0.05)
        self.frame_lines: list[str] = []

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Static("Loading...", id="summary")
        with VerticalScroll(id="frame-scroll"):
            yield Static(id="frame")
        yield Footer()

    def on_mount(self) -> None:
        """Draw the first frame and start the refresh timer."""
        self.action_refresh_frame()
        self.set_interval(self._delay, self.action_refresh_frame)

    def action_refresh_frame(self) -> None:
        """Build a new frame and redraw."""
        lines = self._frame_source()
        self.frame_lines = lines

        # Plain Text so paths and command lines are never parsed as markup
        self.query_one("#summary", Static).update(Text(lines[0]))
        self.query_one("#frame", Static).update(Text("\n".join(lines[1:])))
