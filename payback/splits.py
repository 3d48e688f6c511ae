"""Split helpers for filling in the expense form."""

import math
from collections.abc import Sequence
from uuid import UUID


def even_split(participant_ids: Sequence[UUID]) -> dict[UUID, float]:
    """
    Divide 100% evenly between participants.

    Every share is rounded down to two decimals and the leftover goes to
    the last participant, so the shares always total exactly 100
    (three people get 33.33 / 33.33 / 33.34).
    """
    if not participant_ids:
        return {}

    # Work in hundredths of a percent to avoid float drift
    base = math.floor(10000 / len(participant_ids))
    remainder = 10000 - base * len(participant_ids)

    shares = {participant_id: base / 100 for participant_id in participant_ids}
    last = participant_ids[-1]
    shares[last] = (base + remainder) / 100
    return shares
