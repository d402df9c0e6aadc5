"""
vidfetch: identify a social media URL and fetch the video behind it
"""

__version__ = "1.0.0"
