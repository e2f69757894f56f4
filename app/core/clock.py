import time
from typing import Callable

# ritorna "adesso" in millisecondi epoch
Clock = Callable[[], int]


def system_clock() -> int:
    return int(time.time() * 1000)

