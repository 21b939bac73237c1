"""Entity interfaces and summary models shared across evoview."""
