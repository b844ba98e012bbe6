"""
Configuration, logging, security primitives, and database plumbing.
"""
