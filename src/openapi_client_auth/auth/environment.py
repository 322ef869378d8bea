"""Multi-source resolution of login settings.

Settings such as the tenant domain, client id and client secret are picked
up from environment variables. A .env file (python-dotenv) is loaded first;
variables already set in the process environment take precedence over it.

Example:
    ```python
    from openapi_client_auth.auth import SettingResolver

    resolver = SettingResolver()
    secret = resolver.resolve(env_var_name="OPENAPI_AUTH_CLIENT_SECRET", required=True)
    ```

Security Considerations:
    - Secrets are never logged in full (masked with ***)
    - Only source information is logged (env var name, file path, etc.)
    - File-based secrets have whitespace stripped
    - Thread-safe dotenv loading with lock
"""

import logging
import os
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

from openapi_client_auth.auth.exceptions import CredentialNotFoundError, InvalidArgumentError

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset(["1", "true", "yes", "on"])
_FALSE_VALUES = frozenset(["0", "false", "no", "off"])


class SettingResolver:
    """Resolve login settings from the environment and .env files.

    Attributes:
        _dotenv_loaded: Whether .env file has been loaded.
        _dotenv_lock: Thread lock for safe dotenv loading.
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        """Initialize setting resolver.

        Args:
            dotenv_path: Path to .env file. If None, python-dotenv searches
                parent directories.
            load_dotenv: Whether to load a .env file at all.
        """
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        """Load the .env file once (thread-safe)."""
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for setting resolution")
            except Exception as e:
                # A broken .env must not hide variables set in the process environment
                logger.warning(f"Failed to load .env file: {e}")
            self._dotenv_loaded = True

    @staticmethod
    def _mask(value: str | None) -> str:
        return "None" if value is None else "***"

    def resolve(
        self,
        *,
        env_var_name: str,
        required: bool = False,
        mask_in_logs: bool = True,
    ) -> str | None:
        """Resolve a setting from the environment.

        Args:
            env_var_name: Environment variable name to check (covers values
                loaded from the .env file).
            required: Raise CredentialNotFoundError when the variable is unset.
            mask_in_logs: Mask the value in log messages. Disable only for
                non-sensitive settings such as domains and URLs.

        Returns:
            Resolved value, or None if not found and not required.

        Raises:
            CredentialNotFoundError: If required=True and the variable is unset.
        """
        result = os.environ.get(env_var_name)

        if result is not None:
            shown = self._mask(result) if mask_in_logs else result
            logger.debug(f"Resolved setting from environment variable '{env_var_name}': {shown}")
        elif required:
            raise CredentialNotFoundError(
                f"Required setting not found (checked env var: {env_var_name})", env_var_name=env_var_name
            )

        return result

    def resolve_bool(self, *, env_var_name: str, default: bool) -> bool:
        """Resolve a boolean flag such as ``VALIDATE_AUTHORITY``.

        Raises:
            InvalidArgumentError: If the variable is set to an unrecognized value
        """
        raw = self.resolve(env_var_name=env_var_name, mask_in_logs=False)
        if raw is None:
            return default
        normalized = raw.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
        raise InvalidArgumentError(env_var_name, f"Invalid boolean value for {env_var_name}: {raw!r}")

    def resolve_from_file(self, *, env_var_name: str, required: bool = False) -> str | None:
        """Read a secret from the file named by an environment variable.

        The path supports ``~`` and ``$VAR`` expansion. Contents are stripped.

        Returns:
            File contents, or None if the variable is unset or the file is
            unreadable and not required.

        Raises:
            CredentialNotFoundError: If required=True and the file cannot be read.
        """
        path_to_use = self.resolve(env_var_name=env_var_name, mask_in_logs=False)

        if not path_to_use:
            if required:
                raise CredentialNotFoundError(
                    f"No file path provided for secret resolution (env var '{env_var_name}' not set)",
                    env_var_name=env_var_name,
                )
            return None

        path_obj = Path(os.path.expanduser(os.path.expandvars(path_to_use)))

        try:
            content = path_obj.read_text().strip()
        except FileNotFoundError:
            error_msg = f"Secret file not found: {path_obj}"
            if required:
                raise CredentialNotFoundError(error_msg, env_var_name=env_var_name) from None
            logger.debug(error_msg)
            return None
        except PermissionError:
            error_msg = f"Permission denied reading secret file: {path_obj}"
            if required:
                raise CredentialNotFoundError(error_msg, env_var_name=env_var_name) from None
            logger.warning(error_msg)
            return None
        except OSError as e:
            error_msg = f"Error reading secret file {path_obj}: {e}"
            if required:
                raise CredentialNotFoundError(error_msg, env_var_name=env_var_name) from e
            logger.warning(error_msg)
            return None

        logger.debug(f"Resolved secret from file: {path_obj} (***)")
        return content
