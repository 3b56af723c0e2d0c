"""Error taxonomy and classification."""
