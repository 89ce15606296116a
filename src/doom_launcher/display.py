"""Console rendering and input for the selection menus."""

from rich.console import Console
from rich.markup import escape

from doom_launcher.catalog.catalog import Catalog, format_entry_line
from doom_launcher.constants import CONSOLE_PROMPT


class ConsoleDisplay:
    """Renders menu screens with rich."""

    def __init__(self, console: Console | None = None, clear: bool = True):
        self.console = console or Console()
        self.clear = clear

    def show_screen(self, title: str, header: str, catalog: Catalog) -> None:
        if self.clear:
            self.console.clear()
        self.console.print(f"[bold]{escape(header)}[/]\n")
        self.console.print(f"[bold]{escape(title)}[/]")
        self.show_listing(catalog)

    def show_listing(self, catalog: Catalog) -> None:
        """Category-grouped listing, one ``code - description`` line per entry."""
        listing = catalog.sorted_listing()
        if not listing:
            self.console.print("[dim](nothing configured)[/]\n")
            return
        for category, entries in listing:
            self.console.print(f"[bold cyan]{escape(category)}[/]")
            for entry in entries:
                self.console.print(f"  {escape(format_entry_line(entry))}")
            self.console.print()

    def show_message(self, text: str) -> None:
        self.console.print(f"[yellow]{escape(text)}[/]")

    def show_not_found(self, query: str, suggestions: list) -> None:
        self.console.print(f"[red]No entry matches '{escape(query)}'[/]")
        if suggestions:
            codes = ", ".join(
                f"[cyan]{escape(s.entry.code)}[/] ({escape(s.entry.description)})"
                for s in suggestions
            )
            self.console.print(f"  Did you mean: {codes}")


class ConsoleInput:
    """Reads one line per call; end of input becomes None."""

    def __init__(self, console: Console | None = None, prompt: str = CONSOLE_PROMPT):
        self.console = console or Console()
        self.prompt = prompt

    def __call__(self) -> str | None:
        try:
            return self.console.input(self.prompt)
        except EOFError:
            return None
