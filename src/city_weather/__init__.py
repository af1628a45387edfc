"""City weather lookup service."""
