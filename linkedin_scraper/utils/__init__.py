"""Utility modules for the LinkedIn scraper."""
