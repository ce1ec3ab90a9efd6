"""Domain model for items, carts, stock changes, sales and metrics."""
