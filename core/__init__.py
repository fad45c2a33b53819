"""Message handling: routing, commands and translation fan-out."""
