"""PathWatch test suite."""
