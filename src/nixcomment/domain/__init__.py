"""Domain layer — lexing, block structure, and lint rules.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""
