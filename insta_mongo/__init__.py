"""Disposable in-memory MongoDB with a REST API for loading test fixtures."""

__version__ = "0.1.0"
