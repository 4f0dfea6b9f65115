"""Force-directed skill network layout and viewer."""
