"""Pull request title checks and review reconciliation."""
