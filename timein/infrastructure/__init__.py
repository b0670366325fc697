"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the application to the outside world (geocoding API, timezone
database, file system, terminal) by implementing the interfaces defined in
the domain layer.
"""
