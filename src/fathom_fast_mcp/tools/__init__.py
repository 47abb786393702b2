"""Tool modules; each exposes ``register(mcp)``."""
