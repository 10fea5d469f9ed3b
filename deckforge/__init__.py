"""deckforge: deck list recognition, resolution and canonical serialization."""
