"""Configuration, logging and template setup shared by the application."""
