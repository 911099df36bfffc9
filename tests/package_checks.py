from __future__ import annotations

import logging
import sys
import threading

from pnendpoint import PNConfiguration, PubSubContext, RequestExecutor, StatusCategory
from pnendpoint.operations import TimeOperation

logger: logging.Logger = logging.getLogger(__name__)


def check_time() -> None:
    logger.info("Checking time...")
    with PubSubContext(PNConfiguration(uuid="package-checks")) as context:
        result = RequestExecutor(context, TimeOperation(context)).execute()
    assert result.timetoken > 0


def check_time_async() -> None:
    logger.info("Checking time in callback mode...")
    done = threading.Event()
    statuses = []

    def callback(result: object, status: object) -> None:
        statuses.append(status)
        done.set()

    with PubSubContext(PNConfiguration(uuid="package-checks")) as context:
        RequestExecutor(context, TimeOperation(context)).execute_async(callback)
        assert done.wait(30.0)
    assert statuses[0].category == StatusCategory.ACKNOWLEDGMENT


def main() -> None:
    r"""Run all package checks to validate installation and
    functionality."""
    try:
        check_time()
        check_time_async()

        logger.info("✅ All package checks passed successfully!")
    except Exception:
        logger.exception("❌ Package check failed")
        sys.exit(1)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
