# lightning_yield/config/env.py
import os

# Environment constants to avoid typos in comparisons
ENV_DEV = "dev"
ENV_PROD = "prod"

# Simple env flag: "dev" for local testing defaults, defaulting to "prod"
APP_ENV = os.getenv("APP_ENV", ENV_PROD).lower()

# Verbose logging in dev unless overridden
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if APP_ENV == ENV_DEV else "INFO").upper()
