"""Desktop front-end."""
