"""HTTP layer for the download gate."""
