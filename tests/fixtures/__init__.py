"""Shared pytest fixtures for vyperkit tests."""
