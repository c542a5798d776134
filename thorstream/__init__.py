"""
thorstream — client for the Thor event publisher stream.

Decodes the multiplexed event feed (slot statuses, account updates and
transactions), routes each frame to the decoder for the active subscription,
and hands normalized records to the JSON-lines logs and the console.
"""

__version__ = "0.1.0"
