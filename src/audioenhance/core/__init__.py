"""Pipeline stages for audioenhance."""
