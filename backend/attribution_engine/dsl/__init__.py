"""Period resolution, date filtering and hierarchy lookups."""
