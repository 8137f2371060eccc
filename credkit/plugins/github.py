"""
GitHub

Personal access token used by the ``gh`` CLI and other GitHub tooling.
"""

from ..importer import TryAll, TryAllEnvVars, TryEnvVarPair
from ..provision import EnvVars
from ..schema import Charset, CompositionRule, CredentialSchema, FieldSchema, credname, fieldname

DEFAULT_ENV_VAR_MAPPING = {
    fieldname.TOKEN: "GITHUB_TOKEN",
}


def personal_access_token() -> CredentialSchema:
    return CredentialSchema(
        name=credname.PERSONAL_ACCESS_TOKEN,
        plugin="github",
        docs_url="https://docs.github.com/en/authentication/keeping-your-account-and-data-secure/creating-a-personal-access-token",
        management_url="https://github.com/settings/tokens",
        fields=[
            FieldSchema(
                name=fieldname.TOKEN,
                description="Token used to authenticate to GitHub.",
                secret=True,
                composition=CompositionRule(
                    length=93,
                    prefix="github_pat_",
                    charset=Charset(uppercase=True, lowercase=True, digits=True),
                ),
            ),
            FieldSchema(
                name=fieldname.HOST,
                description="The GitHub host to authenticate to. Defaults to 'github.com'.",
                optional=True,
            ),
        ],
        provisioner=EnvVars(DEFAULT_ENV_VAR_MAPPING),
        importer=TryAll(
            TryEnvVarPair(DEFAULT_ENV_VAR_MAPPING),
            TryAllEnvVars(fieldname.TOKEN, "GH_TOKEN", "GITHUB_PAT"),
            *[
                TryEnvVarPair({fieldname.HOST: "GH_HOST", fieldname.TOKEN: token_var})
                for token_var in (
                    "GH_ENTERPRISE_TOKEN",
                    "GITHUB_ENTERPRISE_TOKEN",
                    "GH_TOKEN",
                    "GITHUB_TOKEN",
                )
            ],
        ),
    )
