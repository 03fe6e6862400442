"""
Application layer.

Request-level orchestration: image payload parsing and the scan service.
"""
