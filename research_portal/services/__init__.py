"""
Services for the Research Portal.
"""
