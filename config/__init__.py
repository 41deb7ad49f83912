"""config — environment-driven settings."""
