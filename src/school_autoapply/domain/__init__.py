"""Domain layer: models, errors and pure rules."""
