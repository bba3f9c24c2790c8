"""WikiRag — answer questions from Wikipedia pages with a language model."""
