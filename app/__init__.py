"""
Refonte Quiz API
Website-redesign readiness quiz: scoring and lead submission.
"""

__version__ = "1.0.0"
