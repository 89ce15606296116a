"""Expand an entry's inherited paths into one ordered list."""

from doom_launcher.catalog.catalog import Catalog, InvariantViolation
from doom_launcher.catalog.schemas import Entry


def parent_chain(catalog: Catalog, entry: Entry) -> list[Entry]:
    """The entry followed by its ancestors, nearest first.

    Raises:
        InvariantViolation: a parent code is missing from the catalog, or
            the chain revisits a code (cycle)
    """
    chain = [entry]
    seen = {entry.code.strip().casefold()}
    current = entry

    while current.parent_code and current.parent_code.strip():
        parent = catalog.lookup(current.parent_code)
        if parent is None:
            raise InvariantViolation(
                f"Entry {current.code!r} names missing parent {current.parent_code!r}"
            )
        key = parent.code.strip().casefold()
        if key in seen:
            cycle = " -> ".join([e.code for e in chain] + [parent.code])
            raise InvariantViolation(f"Parent cycle detected: {cycle}")
        seen.add(key)
        chain.append(parent)
        current = parent

    return chain


def flatten(catalog: Catalog, entry: Entry | None) -> list[str]:
    """Root ancestor's paths first, the entry's own paths last."""
    if entry is None:
        return []

    paths: list[str] = []
    for ancestor in reversed(parent_chain(catalog, entry)):
        paths.extend(ancestor.paths)
    return paths
