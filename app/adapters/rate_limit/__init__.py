"""Rate limiting adapters.

This package provides a small abstraction layer over the outbound request
gate so the cache can be tested with a fake clock and a fake sleeper.
"""
