from __future__ import annotations

import time


def now_timestamp() -> int:
    """Current time as whole seconds since the epoch.

    Note: Wrapped so tests can inject a fixed clock instead.
    """
    return int(time.time())
