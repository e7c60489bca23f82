"""
Network Reachability Tool
Cheap connectivity probe consulted before calling external AI services
"""

import logging
from typing import Optional

import requests

from config import settings


logger = logging.getLogger(__name__)


def is_network_available(url: Optional[str] = None, timeout: Optional[float] = None) -> bool:
    """
    Check whether the internet is reachable.

    Never raises; any failure is reported as offline.
    """
    url = url or settings.NETWORK_CHECK_URL
    timeout = timeout if timeout is not None else settings.NETWORK_CHECK_TIMEOUT
    try:
        resp = requests.head(url, timeout=timeout, allow_redirects=True)
        return resp.status_code < 500
    except Exception as e:
        logger.info(f"Network check failed ({url}): {e}")
        return False
