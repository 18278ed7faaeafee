"""IO boundary helpers: filesystem access and inbound payload validation."""
