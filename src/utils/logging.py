"""Logging utilities for mongo_scoop."""

import logging
import sys

from azure.monitor.opentelemetry import configure_azure_monitor
from opentelemetry.instrumentation.logging import LoggingInstrumentor

from constants import APPLICATIONINSIGHTS_CONNECTION_STRING, LOGGING_LEVEL

# Query and connection events are logged under this name
logger = logging.getLogger("mongo_scoop")

logger.setLevel(LOGGING_LEVEL)

# Operation lines look like: db.users.find({...}) [1.234ms] [2 docs]
formatter = logging.Formatter("%(asctime)s - PID:%(process)d - Thread:%(thread)d - %(name)s - %(levelname)s - %(message)s")

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setFormatter(formatter)
logger.addHandler(console_handler)

# Ship operation logs to Application Insights when configured
if APPLICATIONINSIGHTS_CONNECTION_STRING:
    configure_azure_monitor(
        connection_string=APPLICATIONINSIGHTS_CONNECTION_STRING,
    )
    LoggingInstrumentor().instrument(level=LOGGING_LEVEL, excluded_loggers=["azure"])

# Handled above, keep it out of the root logger
logger.propagate = False
