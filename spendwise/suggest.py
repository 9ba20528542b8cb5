from typing import Iterable, Tuple, Union

from spendwise.domain import DEFAULT_ICONS, Entry, Kind, Suggestion
from spendwise.sorting import filter_entries


def suggest(prior_entries: Iterable[Entry], prefix: str, limit: int = 5) -> Tuple[Suggestion, ...]:
    """Autocomplete candidates for a label field.

    A label qualifies when it contains ``prefix`` case-insensitively but is
    not the prefix itself. The first entry seen for a label decides its icon
    and its position.
    """
    needle = (prefix or "").lower()
    if not needle or limit < 1:
        return ()

    seen: dict[str, Suggestion] = {}
    for e in prior_entries:
        hay = e.label.lower()
        if needle not in hay or hay == needle:
            continue
        if e.label not in seen:
            seen[e.label] = Suggestion(label=e.label, icon=e.display_icon)
            if len(seen) >= limit:
                break

    return tuple(seen.values())


def suggest_for(
    entries: Iterable[Entry],
    kind: Union[Kind, str],
    prefix: str,
    limit: int = 5,
) -> Tuple[Suggestion, ...]:
    """Suggestions drawn only from history of the same kind."""
    kind = Kind(kind)
    return suggest(filter_entries(entries, kind), prefix, limit)


def default_icon(kind: Union[Kind, str]) -> str:
    return DEFAULT_ICONS[Kind(kind)]
