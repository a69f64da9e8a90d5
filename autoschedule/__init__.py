"""Auto-scheduling service: engine, persistence adapters, API and background jobs."""
