"""Explanation tree models."""
