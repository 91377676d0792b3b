"""Constants for data generation."""

# Default number of rows requested per entity
DEFAULT_ROW_COUNT = 10_000

# Value ranges for numeric fields without an override
MAX_INT_VALUE = 100_000_000
MAX_FLOAT_VALUE = 100_000_000.0

# Redraws allowed for a unique field before giving up
MAX_UNIQUE_ATTEMPTS = 100

# Column-name overrides
EMAIL_DOMAIN = "email.com"
PHONE_REGION = "US"
PASSWORD_HASH_ROUNDS = 1_000

# Edge rows
EDGE_COLUMNS = ["id1", "id1_type", "edge_type", "id2", "id2_type", "time", "data"]
