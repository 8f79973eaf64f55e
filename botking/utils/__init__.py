"""Utility helpers shared across BotKing layers."""
