"""WriteRight analysis tests."""
