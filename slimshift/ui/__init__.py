"""Terminal rendering for SlimShift."""
