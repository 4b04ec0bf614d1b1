"""userform: validation and interaction state for the Create User form."""
