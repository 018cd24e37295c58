"""Storage infrastructure: codec, schema, store handle, repositories."""
