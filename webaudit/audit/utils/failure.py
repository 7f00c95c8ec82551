"""Failure barrier used wherever a fault must not stop the scan.

The run lifecycle guarantees that timing, snapshot assembly and reporting
always happen. Each phase that may fail is run through ``failure_barrier``,
which logs the fault and hands it back to the caller instead of raising.
"""

import logging
import traceback
from typing import Any, Callable, Optional


logger = logging.getLogger(__name__)


def failure_barrier(
    thunk: Callable[[], Any],
    description: str,
    absorb_interrupts: bool = False,
    log: Optional[logging.Logger] = None
) -> Optional[BaseException]:
    """Run ``thunk`` and contain any fault it raises.

    Args:
        thunk: Zero-argument callable to run
        description: What is being run, used in the error line
        absorb_interrupts: Also contain KeyboardInterrupt, so that a user
            abort still lets the caller finalize with partial results
        log: Logger to report through (defaults to this module's)

    Returns:
        The captured exception, or None if the thunk completed
    """
    log = log or logger
    absorbed = (Exception, KeyboardInterrupt) if absorb_interrupts else (Exception,)

    try:
        thunk()
    except absorbed as e:
        if isinstance(e, KeyboardInterrupt):
            log.error(f"{description} interrupted, continuing with partial results")
        else:
            log.error(f"Error in {description}: {e}")
        log.debug(f"Traceback for {description}:\n{traceback.format_exc()}")
        return e

    return None
