"""
Dense ranking of scored cities.
"""
from typing import List, Sequence

from weatherwell.scoring.observation import ScoredCity


def rank_cities(cities: Sequence[ScoredCity]) -> List[ScoredCity]:
    """
    Assign ranks 1..N by descending comfort score.

    Equal scores get consecutive ranks in input order. The returned list keeps the
    input order; only the rank values differ. Input objects are not modified.

    Args:
        cities: Scored cities of one fetch cycle

    Returns:
        New list of ScoredCity with rank populated
    """
    # sorted() is stable, so ties keep their input order
    order = sorted(range(len(cities)), key=lambda i: cities[i].comfort_score, reverse=True)

    ranks = [0] * len(cities)
    for position, index in enumerate(order):
        ranks[index] = position + 1

    return [city.with_rank(rank) for city, rank in zip(cities, ranks)]
