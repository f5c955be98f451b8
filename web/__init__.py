"""ReplicaPage web server."""
