"""Root conftest: shared test configuration."""

import os

# Ensure tests never pick up a developer's .env threshold
os.environ.setdefault("HIGH_RISK_THRESHOLD", "0.6")
os.environ.setdefault("LOG_FORMAT", "text")
