"""WebSocket bridge between a Blockfall game and remote clients."""
