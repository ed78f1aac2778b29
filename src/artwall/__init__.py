"""
artwall - refresh your desktop wallpaper with public domain paintings from museum collections.
"""

__version__ = "0.1.0"
