"""Pure booking rules: schedule validation, booking validation and lifecycle."""
