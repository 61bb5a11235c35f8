"""
HTTP API for Thumbsmith
"""
