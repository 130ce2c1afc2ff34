"""Constants for the application."""

import logging
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Logging
LOGGING_LEVEL = getattr(logging, os.environ.get("LOGGING_LEVEL", "INFO").upper(), logging.INFO)
APPLICATIONINSIGHTS_CONNECTION_STRING = os.environ.get("APPLICATIONINSIGHTS_CONNECTION_STRING")

# MongoDB settings
DATABASE_CONNECTION_STRING = os.environ.get("DATABASE_CONNECTION_STRING", "")
DATABASE_NAME = os.environ.get("DATABASE_NAME", "test")
