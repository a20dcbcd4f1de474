# utils.py

"""Utility functions for Hypervisor Stats."""

import logging
import os
from typing import Dict, Optional

import requests
from requests.auth import AuthBase

from .config import (
    CHEF_API_VERSION, DEFAULT_CHEF_SERVER_HOST, DEFAULT_CHEF_SERVER_PORT,
    CHEF_SERVER_URL_ENV, CHEF_USERNAME_ENV, CHEF_CLIENT_KEY_ENV, ENV_VARS,
    LOG_FORMAT, LOG_DATE_FORMAT
)
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

def setup_logging(verbose: bool = False) -> None:
    """Configure logging with appropriate level and format."""
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT
    )

def get_env_settings() -> Dict[str, str]:
    """Return the Hypervisor Stats environment variables that are set."""
    return {var: os.environ[var] for var in ENV_VARS if os.environ.get(var)}

def get_chef_server_url(host: Optional[str] = None, port: Optional[int] = None) -> str:
    """
    Resolve the Chef server URL.

    Explicit host/port win; otherwise CHEF_SERVER_URL from the environment is
    used, falling back to the configured defaults.
    """
    env = get_env_settings()
    if host is None and port is None and CHEF_SERVER_URL_ENV in env:
        return env[CHEF_SERVER_URL_ENV].rstrip('/')

    host = host or DEFAULT_CHEF_SERVER_HOST
    port = DEFAULT_CHEF_SERVER_PORT if port is None else port
    if not 0 < port < 65536:
        raise ConfigurationError(f"Invalid Chef server port: {port}")
    return f"http://{host}:{port}"

class ChefRequestAuth(AuthBase):
    """
    Identifies the Chef client on every request.

    Adds X-Ops-UserId and hands the request to sign(). The base class leaves
    requests unsigned, which chef-zero and authenticating proxies accept;
    subclasses override sign() to add the X-Ops-Authorization-N headers
    computed with the client key.
    """

    def __init__(self, username: str, key_path: Optional[str] = None):
        self.username = username
        self.key_path = key_path

    def sign(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        return request

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        request.headers["X-Ops-UserId"] = self.username
        return self.sign(request)

def resolve_client_key(username: str, key_path: Optional[str] = None) -> Optional[str]:
    """
    Find the client key file for a user.

    An explicit path or CHEF_CLIENT_KEY must exist; otherwise <username>.pem
    in the working directory is used when present.
    """
    key_path = key_path or get_env_settings().get(CHEF_CLIENT_KEY_ENV)
    if key_path:
        if not os.path.isfile(key_path):
            raise ConfigurationError(f"Chef client key not found: {key_path}")
        return key_path

    default_key = f"{username}.pem"
    return default_key if os.path.isfile(default_key) else None

def get_chef_session(username: Optional[str] = None, key_path: Optional[str] = None,
                     auth_class=ChefRequestAuth) -> requests.Session:
    """
    Create an HTTP session for the Chef server API.

    Raises ConfigurationError if no user name is given or set in CHEF_USERNAME,
    or if the given client key does not exist.
    """
    username = username or get_env_settings().get(CHEF_USERNAME_ENV)
    if not username:
        raise ConfigurationError(
            f"Missing Chef user name: pass --name or set {CHEF_USERNAME_ENV}"
        )

    key_path = resolve_client_key(username, key_path)
    logger.debug(f"Chef client {username} using key {key_path or '(none)'}")

    session = requests.Session()
    session.headers.update({
        "Accept": "application/json",
        "X-Chef-Version": CHEF_API_VERSION,
    })
    session.auth = auth_class(username, key_path)
    return session
