"""Session-based authentication for merchants using the stylist."""
