"""Infrastructure layer: configuration, database, logging and blob storage."""
