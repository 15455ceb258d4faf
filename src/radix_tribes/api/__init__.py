"""HTTP/WebSocket boundary and the authoritative game server."""
