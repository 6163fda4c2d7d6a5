"""HTTP middleware: request logging and error handling."""
