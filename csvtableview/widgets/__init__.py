"""Widget package for the CSV table viewer."""
