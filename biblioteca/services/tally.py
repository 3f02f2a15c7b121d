from dataclasses import dataclass, field

from ..models.polls import Poll


@dataclass(frozen=True)
class Tally:
    results: dict[str, int] = field(default_factory=dict)
    total_votes: int = 0

    def breakdown(self) -> list[dict]:
        rows = []
        for option, votes in self.results.items():
            pct = (votes / self.total_votes * 100.0) if self.total_votes > 0 else 0.0
            rows.append({"option": option, "votes": votes, "percentage": round(pct, 2)})
        return rows


def compute_results(store, poll: Poll) -> Tally:
    """
    Per-option vote counts for ``poll``, in declared option order.

    Every declared option is present (zero-filled). Votes are append-only, so
    this runs outside a write transaction and may lag, but never shows a
    partial vote.
    """
    counts = store.count_votes_by_option(poll.id)
    results = {option: counts.get(option, 0) for option in poll.options}
    return Tally(results=results, total_votes=sum(counts.values()))
