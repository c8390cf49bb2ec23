"""
Configuration management for the Uploads API.

Contains the Pydantic settings class and the cached accessor used by the
application factory and the CLI.
"""
