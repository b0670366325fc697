"""Domain Layer: value objects, validated models, errors and interfaces (ports)."""
