"""Well-known credential field names."""

TOKEN = "token"
HOST = "host"
PORT = "port"
USER = "user"
PASSWORD = "password"
DATABASE = "database"
API_KEY = "api_key"
