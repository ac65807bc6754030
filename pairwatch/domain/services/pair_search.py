from __future__ import annotations

from collections.abc import Iterable

from pairwatch.domain.entities.pair import Pair


def _search_fields(pair: Pair) -> list[str]:
    fields = [
        pair.token0.symbol,
        pair.token1.symbol,
        pair.symbol_pair,
    ]
    for token in (pair.token0, pair.token1):
        if token.name:
            fields.append(token.name)
    return fields


def matches_search(pair: Pair, search_term: str) -> bool:
    needle = search_term.lower()
    return any(needle in field.lower() for field in _search_fields(pair))


def filter_pairs(pairs: Iterable[Pair], search_term: str | None) -> list[Pair]:
    items = list(pairs)
    if not search_term:
        return items
    return [pair for pair in items if matches_search(pair, search_term)]


def sort_by_volume(pairs: Iterable[Pair]) -> list[Pair]:
    return sorted(pairs, key=lambda pair: pair.volume_24h, reverse=True)
