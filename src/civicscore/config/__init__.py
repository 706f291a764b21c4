"""Configuration loading and settings models."""
