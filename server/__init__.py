"""DocDesk tool server."""
