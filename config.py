import os
import sys

from dotenv import load_dotenv

from enums.runtime_environment import RuntimeEnvironment

# Load .env but don't override existing environment variables
# This allows test runs to set RUNTIME_ENVIRONMENT=TEST before import
load_dotenv(".env", override=False)

# Parse RUNTIME_ENVIRONMENT with clear error message on misconfiguration
try:
    RUNTIME_ENVIRONMENT = RuntimeEnvironment(os.environ.get("RUNTIME_ENVIRONMENT", RuntimeEnvironment.PROD.value))
except ValueError as e:
    valid_values = [env.value for env in RuntimeEnvironment]
    print(f"\n ERROR: Invalid RUNTIME_ENVIRONMENT configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Valid values: {', '.join(valid_values)}", file=sys.stderr)
    print(f"\nAdd to .env: RUNTIME_ENVIRONMENT={valid_values[0]}\n", file=sys.stderr)
    sys.exit(1)

# Database
DB_NAME = os.environ.get("DB_NAME", "pos.db")
if RUNTIME_ENVIRONMENT == RuntimeEnvironment.TEST:
    DB_URL = os.environ.get("DB_URL", "sqlite+aiosqlite:///:memory:")
else:
    DB_URL = os.environ.get("DB_URL", f"sqlite+aiosqlite:///data/{DB_NAME}")

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG" if RUNTIME_ENVIRONMENT == RuntimeEnvironment.DEV else "INFO")
LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "7"))
LOG_DIR = os.environ.get("LOG_DIR", "logs")

# Store settings
# Affects catalog filtering only, never pricing
HIDE_OUT_OF_STOCK = os.environ.get("HIDE_OUT_OF_STOCK", "false") == "true"
CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "₱")

# Orders
ORDER_NUMBER_PREFIX = os.environ.get("ORDER_NUMBER_PREFIX", "ORD")
try:
    TOP_ITEMS_LIMIT = int(os.environ.get("TOP_ITEMS_LIMIT", "10"))
    if TOP_ITEMS_LIMIT <= 0:
        raise ValueError("TOP_ITEMS_LIMIT must be a positive integer")
except ValueError as e:
    print(f"\n ERROR: Invalid TOP_ITEMS_LIMIT configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Current value: {os.environ.get('TOP_ITEMS_LIMIT', '(not set)')}\n", file=sys.stderr)
    sys.exit(1)
