"""Application services: transactions, change feeds, dashboard, seeding."""
