"""Realtime chat: event envelopes, presence registry and the WebSocket gateway."""
