"""HTTP plumbing shared by every router: envelope, auth, errors and middleware."""
