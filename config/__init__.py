"""
Configuration settings for arpingall.
"""
