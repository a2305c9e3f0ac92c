"""Simple module which define logging module style and returns it."""

import logging
import os
import sys

from ..api import DEBUG_ENV

# Configure the formatting of the logger
logging.basicConfig(format="%(message)s", stream=sys.stdout)
# logging.basicConfig(format='[%(levelname)s] %(message)s')

# Capture warning messages and redirect them through the logger
logging.captureWarnings(True)

# Initialize logger
logger = logging.getLogger("openmw_config")

# Chain traversal details are only shown on request
if os.environ.get(DEBUG_ENV):
    logger.setLevel(logging.DEBUG)
