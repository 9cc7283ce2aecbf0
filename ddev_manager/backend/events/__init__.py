"""
Realtime Events.

Project change notifications pushed to connected WebSocket sessions.
"""
