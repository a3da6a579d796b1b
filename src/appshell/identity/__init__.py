"""Identity service client used by the login flow."""

from appshell.identity.client import IdentityClient, IdentityError, LoginData, LoginResponse, User

__all__ = ["IdentityClient", "IdentityError", "LoginData", "LoginResponse", "User"]
