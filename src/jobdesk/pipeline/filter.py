import logging
from typing import Iterable, List, Set

from jobdesk.models import Job

logger = logging.getLogger(__name__)


def unique_by_id(jobs: Iterable[Job]) -> List[Job]:
    """
    Keep the first job seen for each id, preserving order.
    Later duplicates are dropped with a warning.
    """
    seen: Set[str] = set()
    out: List[Job] = []
    for j in jobs:
        jid = j["id"]
        if jid in seen:
            logger.warning("Dropping duplicate job id %s from listing", jid)
            continue
        seen.add(jid)
        out.append(j)
    return out


def replace_by_id(jobs: Iterable[Job], updated: Job) -> List[Job]:
    """Return a new list with the job sharing `updated`'s id swapped out."""
    return [updated if j["id"] == updated["id"] else j for j in jobs]
