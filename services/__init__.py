"""Business logic shared by the API blueprints and the CLI."""
