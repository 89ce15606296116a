"""Menu flow: mod screen, level screen, mutator screen, then launch.

PICK_MOD -> PICK_LEVEL -> EXECUTE is the normal path. A mod with an IWAD
override is self-contained and goes straight to EXECUTE. The mutator
directive opens PICK_MUTATOR from the mod or level screen; after one
mutator input control returns to the screen it was opened from.
"""

import logging
from enum import Enum
from random import Random
from typing import Callable

from doom_launcher.catalog.catalog import Catalog
from doom_launcher.catalog.schemas import LauncherConfig
from doom_launcher.constants import MUTATOR_MENU_TOKEN, RANDOM_TOKEN
from doom_launcher.core.resolver import (
    Empty,
    NotFound,
    RandomPick,
    Selected,
    SwitchToMutatorMenu,
    pick_random,
    resolve,
)
from doom_launcher.core.session import Session, SessionView

logger = logging.getLogger(__name__)


class LauncherState(Enum):
    PICK_MOD = "mod"
    PICK_LEVEL = "level"
    PICK_MUTATOR = "mutator"
    EXECUTE = "execute"


class SessionAborted(Exception):
    """Input ended before a mod was chosen."""
    pass


SCREEN_TITLES = {
    LauncherState.PICK_MOD: "Pick a gameplay wad:",
    LauncherState.PICK_LEVEL: "Pick a level wad (blank for none):",
    LauncherState.PICK_MUTATOR: "Add a mutator (blank to go back):",
}


class SelectionStateMachine:
    """Drives the selection screens and fills in a Session.

    Args:
        config: Loaded settings; treated as read-only
        session: Session to fill in; mutated in place
        read_line: Returns the next input line, or None at end of input
        display: Screen renderer (see ConsoleDisplay)
        rng: Random source for the random directive
    """

    def __init__(
        self,
        config: LauncherConfig,
        session: Session,
        read_line: Callable[[], str | None],
        display,
        *,
        mutator_token: str = MUTATOR_MENU_TOKEN,
        random_token: str = RANDOM_TOKEN,
        rng: Random | None = None,
    ):
        self.session = session
        self.view = SessionView(config, session)
        self.read_line = read_line
        self.display = display
        self.mutator_token = mutator_token
        self.random_token = random_token
        self.rng = rng or Random()

        self.state = LauncherState.PICK_MOD
        self.trace: list[LauncherState] = [self.state]
        self._return_state: LauncherState | None = None

    def run(self) -> Session:
        """Step until EXECUTE and return the filled-in session."""
        while self.state is not LauncherState.EXECUTE:
            self.step()
        return self.session

    def step(self) -> LauncherState:
        handlers = {
            LauncherState.PICK_MOD: self._pick_mod,
            LauncherState.PICK_LEVEL: self._pick_level,
            LauncherState.PICK_MUTATOR: self._pick_mutator,
        }
        handler = handlers.get(self.state)
        if handler is None:
            return self.state

        next_state = handler()
        logger.debug("State %s -> %s", self.state.value, next_state.value)
        self.state = next_state
        self.trace.append(next_state)
        return next_state

    # --- Screens ---

    def _pick_mod(self) -> LauncherState:
        catalog = self.view.mods
        self._show(catalog)
        while True:
            outcome = self._read_outcome(catalog, abort_on_eof=True)
            if isinstance(outcome, Empty):
                self.display.show_message("A gameplay wad is required.")
                continue
            if isinstance(outcome, SwitchToMutatorMenu):
                return self._open_mutator_menu()

            self.session.mod = outcome.ref
            logger.info("Selected mod %s", outcome.entry.code)
            if outcome.entry.has_iwad:
                return LauncherState.EXECUTE
            return LauncherState.PICK_LEVEL

    def _pick_level(self) -> LauncherState:
        mod = self.view.mod
        if mod is not None and mod.has_iwad:
            return LauncherState.EXECUTE

        catalog = self.view.levels
        self._show(catalog)
        outcome = self._read_outcome(catalog)
        if isinstance(outcome, SwitchToMutatorMenu):
            return self._open_mutator_menu()
        if isinstance(outcome, Selected):
            self.session.level = outcome.ref
            logger.info("Selected level %s", outcome.entry.code)
        return LauncherState.EXECUTE

    def _pick_mutator(self) -> LauncherState:
        catalog = self.view.mutators
        self._show(catalog)
        while True:
            outcome = self._read_outcome(catalog)
            if isinstance(outcome, SwitchToMutatorMenu):
                continue
            if isinstance(outcome, Selected):
                self.session.mutators.append(outcome.ref)
                logger.info("Added mutator %s", outcome.entry.code)
            break

        return_state = self._return_state or LauncherState.PICK_MOD
        self._return_state = None
        return return_state

    # --- Helpers ---

    def _open_mutator_menu(self) -> LauncherState:
        self._return_state = self.state
        return LauncherState.PICK_MUTATOR

    def _show(self, catalog: Catalog) -> None:
        self.display.show_screen(SCREEN_TITLES[self.state], self.view.header(), catalog)

    def _read_outcome(
        self, catalog: Catalog, abort_on_eof: bool = False
    ) -> Selected | SwitchToMutatorMenu | Empty:
        """Read until the input resolves; NotFound and random draws are handled here."""
        while True:
            line = self.read_line()
            if line is None and abort_on_eof:
                raise SessionAborted("Input ended before a gameplay wad was chosen")

            outcome = resolve(
                line,
                catalog,
                mutator_token=self.mutator_token,
                random_token=self.random_token,
            )

            if isinstance(outcome, NotFound):
                logger.debug(
                    "No match for %r (%d suggestions)", outcome.query, len(outcome.suggestions)
                )
                self.display.show_not_found(outcome.query, outcome.suggestions)
                continue

            if isinstance(outcome, RandomPick):
                if catalog.is_empty():
                    self.display.show_message("Nothing to pick from.")
                    continue
                outcome = pick_random(catalog, self.rng)
                self.display.show_message(
                    f"Random pick: {outcome.entry.code} - {outcome.entry.description}"
                )

            return outcome
