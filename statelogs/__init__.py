"""Structured log entries describing the state of Kubernetes resources held in an in-memory cache."""

__version__ = "0.1.0"