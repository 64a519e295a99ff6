"""Device fingerprinting and per-device user-settings persistence."""
