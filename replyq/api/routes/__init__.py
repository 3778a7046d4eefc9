"""HTTP routes of the generation backend."""
