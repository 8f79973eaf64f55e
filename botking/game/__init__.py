"""Game domain objects for BotKing."""
