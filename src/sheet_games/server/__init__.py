"""HTTP and WebSocket hosting for game sessions."""
