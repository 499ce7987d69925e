"""
Support Assignment
Picks the support agent for a new contact. Selection only: the agent's
availability flag is left untouched.
"""

import logging

from supportdesk.exceptions import NoSupportAvailable
from supportdesk.models import Support

logger = logging.getLogger(__name__)


def pick_available_support(support_store) -> Support:
    """
    First available agent in store order.
    Raises NoSupportAvailable when the pool is empty or nobody is available.
    """
    support = support_store.find_first_available()
    if support is None:
        logger.warning("pick_available_support: no support agent available")
        raise NoSupportAvailable()
    logger.debug(f"pick_available_support: picked support {support.id}")
    return support
