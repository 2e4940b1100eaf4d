"""E-commerce persistence layer."""
