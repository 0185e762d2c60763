import base64
from typing import Any, Dict, Mapping, Optional, Union

AUTHORIZATION = "Authorization"


def _base64_encode(text: str) -> str:
    """Standard base64 without line breaks."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _quote(value: Any) -> str:
    text = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


def build_params_value(params: Mapping[str, Any]) -> str:
    """Render ``key="value"`` pairs joined by ', ' in mapping order."""
    return ", ".join(f"{key}={_quote(value)}" for key, value in params.items())


def basic_auth_value(username: Any, password: Any) -> str:
    if username is None or password is None:
        raise ValueError("Basic auth requires username and password")
    return f"Basic {_base64_encode(f'{username}:{password}')}"


def token_auth_value(token: Any, options: Optional[Mapping[str, Any]] = None) -> str:
    """``Token`` header: supplied options in order, then ``token``."""
    if token is None or str(token) == "":
        raise ValueError("Token auth requires a token")
    params: Dict[str, Any] = {str(key): value for key, value in (options or {}).items() if key != "token"}
    params["token"] = token
    return f"Token {build_params_value(params)}"


def authorization_value(scheme: str, credentials: Union[str, Mapping[str, Any]]) -> str:
    """Generic ``<scheme> <credentials>`` value; mappings render as key="value" pairs."""
    if not scheme:
        raise ValueError("Authorization scheme is required")
    if isinstance(credentials, Mapping):
        return f"{scheme} {build_params_value(credentials)}"
    return f"{scheme} {credentials}"


def encode_auth(auth_type: str, **kwargs: Any) -> Dict[str, str]:
    """
    Encodes credentials into an Authorization header.

    Args:
        auth_type: 'basic', 'token' or 'none'.
        **kwargs: username/password for basic; token plus extra options for token.

    Returns:
        A dictionary containing the HTTP headers.
    """
    auth_type = auth_type.lower()

    if auth_type == "basic":
        return {AUTHORIZATION: basic_auth_value(kwargs.get("username"), kwargs.get("password"))}

    if auth_type == "token":
        options = dict(kwargs)
        token = options.pop("token", None)
        return {AUTHORIZATION: token_auth_value(token, options)}

    if auth_type == "none":
        return {}

    raise ValueError(f"Unsupported auth type: {auth_type}")
