import logging
import re

from starrocks_connector.common.errors import ParseNumberFailedException, StarrocksException
from starrocks_connector.rest.models import QueryPlan

log = logging.getLogger("starrocks_connector.planner")

TABLET_ID = re.compile(r"[+-]?[0-9]+")


def select_be_for_tablet(
    query_plan: QueryPlan, logger: logging.Logger = log
) -> dict[str, list[int]]:
    """
    Pick one BE for every tablet of the plan.

    Greedy, single pass: a candidate that holds no tablet yet wins right
    away, otherwise the candidate with the fewest tablets so far. Tablets are
    visited in plan order and candidates in routing order, so the result
    depends on both.
    """
    be_to_tablets: dict[str, list[int]] = {}

    for tablet_key, tablet in query_plan.partitions.items():
        logger.debug(f"Parse tablet info: '{tablet_key}': {tablet}.")
        if not TABLET_ID.fullmatch(tablet_key):
            logger.error(f"Parse tablet id '{tablet_key}' to long failed.")
            raise ParseNumberFailedException("tablet id", tablet_key)
        tablet_id = int(tablet_key)

        target: str | None = None
        tablet_count: int | None = None
        for candidate in tablet.routings:
            if candidate not in be_to_tablets:
                logger.debug(f"Choice a new StarRocks BE '{candidate}' for tablet '{tablet_id}'.")
                be_to_tablets[candidate] = []
                target = candidate
                break
            assigned = len(be_to_tablets[candidate])
            if tablet_count is None or assigned < tablet_count:
                target = candidate
                tablet_count = assigned

        if target is None:
            logger.error(f"Cannot choice StarRocks BE for tablet {tablet_id}")
            raise StarrocksException(f"Cannot choice StarRocks BE for tablet {tablet_id}")

        logger.debug(f"Choice StarRocks BE '{target}' for tablet '{tablet_id}'.")
        be_to_tablets[target].append(tablet_id)

    return be_to_tablets
