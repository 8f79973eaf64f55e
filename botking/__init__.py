"""
BotKing artifact synchronization package.

Domain artifacts (bots, items, accounts, templates and instances) are built by
factories, projected into persistence-shaped records by the DTO layer and kept
in step with the relational store by the auto-sync orchestrator.
"""

__version__ = "0.1.0"
