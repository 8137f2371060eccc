"""
MySQL

Database credentials for the ``mysql`` client, provisioned through a
temporary option file passed with ``--defaults-file``.
"""

from ..importer import TryAll, TryIniFile
from ..provision import TempFile, ini_config
from ..schema import CredentialSchema, FieldSchema, credname, fieldname

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = "3306"

FIELDS = (
    FieldSchema(
        name=fieldname.HOST,
        description="MySQL host to connect to.",
        optional=True,
        default=DEFAULT_HOST,
    ),
    FieldSchema(
        name=fieldname.PORT,
        description="Port used to connect to MySQL.",
        optional=True,
        default=DEFAULT_PORT,
    ),
    FieldSchema(
        name=fieldname.USER,
        description="MySQL user to authenticate as.",
        optional=True,
    ),
    FieldSchema(
        name=fieldname.PASSWORD,
        description="Password used to authenticate to MySQL.",
        secret=True,
    ),
    FieldSchema(
        name=fieldname.DATABASE,
        description="Database name to connect to.",
        optional=True,
    ),
)

# Keys read from option file sections, in candidate field order
OPTION_FILE_KEYS = [
    fieldname.USER,
    fieldname.PASSWORD,
    fieldname.DATABASE,
    fieldname.HOST,
    fieldname.PORT,
]

OPTION_FILE_PATHS = [
    "/etc/my.cnf",
    "/etc/mysql/my.cnf",
    "~/.my.cnf",
    "~/.mylogin.cnf",
]

mysql_config = ini_config("client", FIELDS)


def try_mysql_config_file(path: str) -> TryIniFile:
    return TryIniFile(path, OPTION_FILE_KEYS)


def database_credentials() -> CredentialSchema:
    return CredentialSchema(
        name=credname.DATABASE_CREDENTIALS,
        plugin="mysql",
        docs_url="https://dev.mysql.com/doc/refman/en/connecting.html",
        fields=FIELDS,
        provisioner=TempFile(mysql_config, filename="my.cnf", flag="--defaults-file"),
        importer=TryAll(*[try_mysql_config_file(path) for path in OPTION_FILE_PATHS]),
    )
