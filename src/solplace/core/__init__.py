"""Core placement rules: configuration, addressing, fees and cooldowns."""
