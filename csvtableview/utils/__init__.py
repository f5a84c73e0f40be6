"""Host-side utilities: configuration, file admission and project constants."""
