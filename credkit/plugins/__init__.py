"""
Built-in Credential Types

Each integration is plain data: a function returning a CredentialSchema.
"""

from typing import Callable, Dict, List

from . import github, mysql
from ..schema import CredentialSchema

BUILTIN_TYPES: Dict[str, Callable[[], CredentialSchema]] = {
    "github.personal_access_token": github.personal_access_token,
    "mysql.database_credentials": mysql.database_credentials,
}


def builtin_credential_types() -> List[CredentialSchema]:
    """Build every built-in credential type."""
    return [factory() for factory in BUILTIN_TYPES.values()]


__all__ = ["BUILTIN_TYPES", "builtin_credential_types", "github", "mysql"]
