"""Test suite for the movie explorer store."""
