"""Turn a line of user input into a catalog selection or a menu directive.

Resolution order: blank input, directive tokens, exact code match, then
fuzzy suggestions. Directives are checked first so a navigation command
is never shadowed by a catalog code or a fuzzy hit.
"""

from dataclasses import dataclass, field
from random import Random

from rapidfuzz import fuzz, process, utils

from doom_launcher.catalog.catalog import Catalog, InvariantViolation, SelectionRef
from doom_launcher.catalog.schemas import Entry
from doom_launcher.constants import (
    FUZZY_SCORE_THRESHOLD,
    MUTATOR_MENU_TOKEN,
    RANDOM_TOKEN,
)


@dataclass(frozen=True)
class Selected:
    """Input named an entry exactly."""

    category: str
    index: int
    entry: Entry

    @property
    def ref(self) -> SelectionRef:
        return SelectionRef(self.category, self.index)


@dataclass(frozen=True)
class SwitchToMutatorMenu:
    """Input was the mutator-menu directive."""


@dataclass(frozen=True)
class RandomPick:
    """Input was the random directive; the caller draws the entry."""


@dataclass(frozen=True)
class Empty:
    """Blank input or end of input."""


@dataclass(frozen=True)
class Suggestion:
    entry: Entry
    score: float


@dataclass(frozen=True)
class NotFound:
    """No exact match. Suggestions are ordered best first and may be empty."""

    query: str
    suggestions: list[Suggestion] = field(default_factory=list)


Outcome = Selected | SwitchToMutatorMenu | RandomPick | Empty | NotFound


def resolve(
    raw_input: str | None,
    catalog: Catalog,
    *,
    mutator_token: str = MUTATOR_MENU_TOKEN,
    random_token: str = RANDOM_TOKEN,
) -> Outcome:
    """Resolve one line of input against a catalog. Never raises on bad input."""
    if raw_input is None or not raw_input.strip():
        return Empty()

    query = raw_input.strip()
    folded = query.casefold()

    if folded == mutator_token.strip().casefold():
        return SwitchToMutatorMenu()
    if folded == random_token.strip().casefold():
        return RandomPick()

    ref = catalog.locate(query)
    if ref is not None:
        return Selected(ref.category, ref.index, catalog.entry_at(ref))

    return NotFound(query, suggest(query, catalog))


def suggest(
    query: str, catalog: Catalog, threshold: float = FUZZY_SCORE_THRESHOLD
) -> list[Suggestion]:
    """Entries whose code scores at least ``threshold`` against the query."""
    entries = [e for e in catalog.all_entries() if e.selectable]
    if not entries:
        return []

    matches = process.extract(
        query,
        [e.code for e in entries],
        scorer=fuzz.token_set_ratio,
        processor=utils.default_process,
        score_cutoff=threshold,
        limit=None,
    )
    # Stable sort keeps catalog order among equal scores
    ranked = sorted(matches, key=lambda m: (-m[1], m[2]))
    return [Suggestion(entries[index], score) for _, score, index in ranked]


def pick_random(catalog: Catalog, rng: Random | None = None) -> Selected:
    """Uniform category among non-empty ones, then uniform entry within it."""
    rng = rng or Random()
    categories = catalog.non_empty_categories()
    if not categories:
        raise InvariantViolation("Cannot pick at random from an empty catalog")

    category = rng.choice(categories)
    index, entry = rng.choice(catalog.selectable_in_category(category))
    return Selected(category, index, entry)
