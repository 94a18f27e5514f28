"""
Reusable mock factories for WebSocket connections and application state.
"""
