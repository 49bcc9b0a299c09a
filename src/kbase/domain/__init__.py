"""Domain layer — document types, extraction, and resolution rules.

This layer depends only on stdlib and markdown-it-py.
It must never import from services, infrastructure, commands, or config.
"""
