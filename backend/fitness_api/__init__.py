"""
Fitness Tracker API package.
"""
