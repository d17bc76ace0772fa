"""
Runtime settings for the CuálProfe backend.

Values come from environment variables where deployments need to change
them; rating rules are plain constants shared by validation and display.
"""
from __future__ import annotations

import os

DATABASE_URL = os.getenv("CUALPROFE_DATABASE_URL", "sqlite:///./cualprofe.db")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CUALPROFE_CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173",
    ).split(",")
    if origin.strip()
]

# Logging
LOG_LEVEL = os.getenv("CUALPROFE_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Rating submission rules
MIN_SCORE = 1
MAX_SCORE = 5
MIN_COMMENT_LENGTH = 50
MAX_COMMENT_LENGTH = 300
MAX_TAGS_PER_RATING = 3

# Display limits
PROFILE_TOP_TAGS = 5
ANALYTICS_TOP_TAGS = 10
ANALYTICS_TOP_PROFESSORS = 10

# Search
MAX_EDIT_DISTANCE = 2
