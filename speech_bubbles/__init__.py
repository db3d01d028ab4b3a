"""
Speech Bubbles - streamed character replies split into timed, animated speech bubbles.
"""

__version__ = "1.0.0"
