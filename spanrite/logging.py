import logging

logger = logging.getLogger("spanrite")
logger.setLevel(logging.INFO)
