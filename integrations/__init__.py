"""
Backend clients.

Each module wraps one store behind the BackendClient interface.
"""
