"""Models package - settings, Pydantic schemas, enums and domain exceptions."""
