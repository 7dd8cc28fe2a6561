"""Utility modules for common operations.

This package provides reusable utilities for:
- Retry patterns (jittered exponential backoff, exhaustion errors)
"""
