"""Media uploaders: turn local image references into durable URLs."""
