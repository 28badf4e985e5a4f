"""StudyVault: a digital library of PDF textbooks organized by semester and subject."""

__version__ = "0.1.0"
