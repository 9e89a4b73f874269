import logging

from starrocks_connector.common.errors import (
    PARSE_NUMBER_FAILED_MESSAGE,
    ParseNumberFailedException,
)
from starrocks_connector.common.settings import (
    STARROCKS_TABLET_SIZE,
    STARROCKS_TABLET_SIZE_DEFAULT,
    STARROCKS_TABLET_SIZE_MIN,
    Settings,
)
from starrocks_connector.rest.models import PartitionDefinition

log = logging.getLogger("starrocks_connector.planner")


def tablet_count_limit_for_one_partition(cfg: Settings, logger: logging.Logger = log) -> int:
    try:
        tablets_size = cfg.get_int_property(STARROCKS_TABLET_SIZE, STARROCKS_TABLET_SIZE_DEFAULT)
    except ParseNumberFailedException:
        logger.warning(
            PARSE_NUMBER_FAILED_MESSAGE.format(
                field=STARROCKS_TABLET_SIZE, value=cfg.get_property(STARROCKS_TABLET_SIZE)
            )
        )
        tablets_size = STARROCKS_TABLET_SIZE_DEFAULT

    if tablets_size < STARROCKS_TABLET_SIZE_MIN:
        logger.warning(
            f"{STARROCKS_TABLET_SIZE} is less than {STARROCKS_TABLET_SIZE_MIN}, "
            f"set to {STARROCKS_TABLET_SIZE_MIN}."
        )
        tablets_size = STARROCKS_TABLET_SIZE_MIN

    logger.debug(f"Tablet size is set to {tablets_size}.")
    return tablets_size


def tablets_map_to_partition(
    cfg: Settings,
    be_to_tablets: dict[str, list[int]],
    opaqued_query_plan: str,
    database: str,
    table: str,
    logger: logging.Logger = log,
) -> list[PartitionDefinition]:
    """
    Cut every BE's tablets into chunks of at most the configured tablet size,
    one ``PartitionDefinition`` per chunk.
    """
    tablets_size = tablet_count_limit_for_one_partition(cfg, logger)
    partitions: list[PartitionDefinition] = []

    for be_address, tablet_ids in be_to_tablets.items():
        logger.debug(f"Generate partition with beInfo: '{be_address}': {tablet_ids}.")
        unique = list(dict.fromkeys(tablet_ids))
        for first in range(0, len(unique), tablets_size):
            partition = PartitionDefinition(
                database=database,
                table=table,
                settings=cfg,
                be_address=be_address,
                tablet_ids=frozenset(unique[first : first + tablets_size]),
                query_plan=opaqued_query_plan,
            )
            logger.debug(f"Generate one PartitionDefinition '{partition}'.")
            partitions.append(partition)

    return partitions
