"""Configuration loading and reporting."""
