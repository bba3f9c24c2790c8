"""WikiRag command-line interface."""
