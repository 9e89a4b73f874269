import logging
import os
import random
import sys
from typing import TypeVar

T = TypeVar("T")


def setup_logging() -> None:
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        stream=sys.stdout,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _shuffled_first(items: list[T]) -> T:
    shuffled = list(items)
    random.shuffle(shuffled)
    return shuffled[0]
