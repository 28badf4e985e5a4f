"""HTTP API for StudyVault."""
