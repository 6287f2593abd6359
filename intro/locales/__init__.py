"""Built-in translation resources.

Holds the fallback dictionary used when a region dictionary cannot be
fetched. Kept as a real package so importlib.resources finds the JSON both
locally and when installed.
"""
