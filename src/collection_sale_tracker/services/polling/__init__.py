# -*- coding: utf-8 -*-
"""Poll cycle coordination and the polling timer."""

from collection_sale_tracker.services.polling.poll_cycle import PollCycleCoordinator
from collection_sale_tracker.services.polling.polling_runner import PollingRunner

__all__ = ["PollCycleCoordinator", "PollingRunner"]
