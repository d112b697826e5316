"""Services Layer: credential store, tool catalog, dispatch, gateway, streaming.

Invariants:
    - Handlers split by domain (goals, journal)
    - Tool dispatch uses an explicit dict mapping (no auto-discovery)
    - Services depend on repository Protocols, never on ORM models
"""
