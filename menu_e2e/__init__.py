"""End-to-end browser tests for the Greggs online menu."""
