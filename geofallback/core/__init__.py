"""Configuration and logging shared across the package."""
