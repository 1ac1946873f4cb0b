"""Repositories for the companies and jobs tables."""
