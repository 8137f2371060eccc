"""Well-known credential type names."""

PERSONAL_ACCESS_TOKEN = "personal_access_token"
DATABASE_CREDENTIALS = "database_credentials"
