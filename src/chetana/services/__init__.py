"""Business services for the Chetana API."""
