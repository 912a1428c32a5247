"""HTTP surface of the service: the form-plugin webhook and the health endpoint."""
