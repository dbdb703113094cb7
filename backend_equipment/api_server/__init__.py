"""
API server package — HTTP/REST and WebSocket interface.

Validates sensor readings at the boundary, exposes equipment, sensor logs,
risk history, the alert feed and dashboard counts, and relays live alerts.
"""
