"""WriteRight test suite."""
