"""
Configuration management for the File Storage API.

Contains the Pydantic settings model and the cached accessor used by the
app factory, the CLI and the tests.
"""
