"""Keys the authentication layer writes into the session."""

SESSION_USER_ID = "user_id"
SESSION_USER_EMAIL = "user_email"
SESSION_USER_NAME = "user_name"
