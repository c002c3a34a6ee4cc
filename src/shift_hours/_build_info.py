"""Release metadata for shift-hours."""

APP_VERSION = "0.1.0"
