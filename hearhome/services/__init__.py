"""Space services: local store, server sync, create/join flows."""
