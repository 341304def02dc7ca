"""Planning file parsing and loading."""
