"""Return map layout and color-scaling engine."""
