import os
import ssl
from typing import Any

import httpx


def expand_path(path):
    """Expand environment variables and user home directory in path."""
    if not path:
        return path
    # Expand environment variables like $HOME
    path = os.path.expandvars(path)
    # Expand user home directory ~
    path = os.path.expanduser(path)
    return path


def create_ssl_context(force_tls12: bool = False) -> ssl.SSLContext:
    """Build the SSL context for a single client.

    Args:
        force_tls12: Pin both the minimum and maximum protocol version to
            TLS 1.2. The setting only affects the returned context.

    Returns:
        A client-side SSL context.
    """
    # Try truststore first (system certificates)
    try:
        import truststore

        context: ssl.SSLContext = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    except ImportError:
        # Fallback to manual certificate configuration
        import certifi

        ssl_cert_file = expand_path(os.environ.get("SSL_CERT_FILE"))
        requests_ca_bundle = expand_path(os.environ.get("REQUESTS_CA_BUNDLE"))
        ssl_cert_dir = expand_path(os.environ.get("SSL_CERT_DIR"))

        context = ssl.create_default_context(
            cafile=ssl_cert_file or requests_ca_bundle or certifi.where(),
            capath=ssl_cert_dir,
        )

    if force_tls12:
        context.minimum_version = ssl.TLSVersion.TLSv1_2
        context.maximum_version = ssl.TLSVersion.TLSv1_2

    return context


def get_httpx_client_kwargs(
    *,
    timeout: httpx.Timeout,
    force_tls12: bool = False,
    verify_ssl: bool = True,
) -> dict[str, Any]:
    """Keyword arguments for an ``httpx.Client`` serving one execution."""
    verify: ssl.SSLContext | bool = False
    if verify_ssl or force_tls12:
        context = create_ssl_context(force_tls12)
        if not verify_ssl:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        verify = context

    return {
        "verify": verify,
        "timeout": timeout,
        "follow_redirects": True,
    }
