"""Voice enforcement subsystem.

- registry (three watched slots, toggle binding)
- engine (presence event -> action requests)
- dispatcher (single outbound PATCH per request + outcome report)

The collaborators it consumes are described in `interfaces`.
"""
