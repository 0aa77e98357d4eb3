"""
Configuration package (see config.settings).
"""
