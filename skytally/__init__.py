"""SkyTally: rarity tracking for nearby air traffic."""
