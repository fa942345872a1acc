"""
Selfmade Project Checker: automated checks for static front-end coursework

Verifies the project layout, validates markup and stylesheets, inspects the
rendered page in a headless browser and compares it with a reference layout.
"""

__version__ = "0.1.0"
