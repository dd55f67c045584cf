"""
Post-Translator

Submits blog posts to an asynchronous translation provider and applies the
results exactly once, whether they arrive by webhook or by polling.
"""

__version__ = "1.0.0"
