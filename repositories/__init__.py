"""Document store access and persistence mapping."""
