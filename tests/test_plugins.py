from credkit.plugins import BUILTIN_TYPES, builtin_credential_types, github, mysql


def test_every_builtin_has_importer_and_provisioner():
    for credential_type in builtin_credential_types():
        assert credential_type.importer is not None
        assert credential_type.provisioner is not None
        assert credential_type.qualified_name in BUILTIN_TYPES


def test_github_personal_access_token():
    schema = github.personal_access_token()
    assert schema.docs_url.startswith("https://docs.github.com/")
    assert schema.management_url == "https://github.com/settings/tokens"
    assert schema.secret_fields == ["token"]
    assert schema.field("host").optional
    assert len(schema.importer.importers) == 6


def test_mysql_database_credentials():
    schema = mysql.database_credentials()
    assert schema.field_names == ["host", "port", "user", "password", "database"]
    assert schema.defaults == {"host": "127.0.0.1", "port": "3306"}
    assert [f.name for f in schema.fields if not f.optional] == ["password"]
    assert [i.path for i in schema.importer.importers] == mysql.OPTION_FILE_PATHS
    assert schema.provisioner.flag == "--defaults-file"
    assert schema.provisioner.filename == "my.cnf"
