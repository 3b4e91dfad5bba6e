"""Internal endpoint helpers. May change at any time."""
