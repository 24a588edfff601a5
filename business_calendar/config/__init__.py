"""
Configuration management for the business calendar.
"""
