"""Static data the suites assert against."""
