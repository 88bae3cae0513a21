"""Maintenance tools for self-play game record files.

Scan append-style record logs with a pluggable decoder, repair truncated or
corrupt tails, shuffle record order reproducibly, and summarise outcomes,
evaluation reversals and king placement.
"""

__version__ = "0.1.0"
