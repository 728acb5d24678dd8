"""JSON file storage for the access token."""

import asyncio
import os
from pathlib import Path

import orjson
from pydantic import ValidationError
from structlog import get_logger

from twiauth.auth.models import AccessToken
from twiauth.auth.storage.base import TokenStorage
from twiauth.exceptions import CredentialsStorageError


logger = get_logger(__name__)

STORAGE_VERSION = 1


class JsonFileTokenStorage(TokenStorage):
    """Stores the access token in a JSON file readable only by its owner."""

    def __init__(self, file_path: Path) -> None:
        """Initialize storage with file path.

        Args:
            file_path: Path to the JSON file holding the token

        """
        self.file_path = Path(file_path)

    def _read(self) -> AccessToken | None:
        if not self.file_path.exists():
            return None

        try:
            data = orjson.loads(self.file_path.read_bytes())
            return AccessToken.model_validate(data["access_token"])
        except (orjson.JSONDecodeError, KeyError, TypeError, ValidationError):
            logger.exception("token_storage_decode_error", path=str(self.file_path))
            return None
        except OSError:
            logger.exception("token_storage_file_read_error", path=str(self.file_path))
            return None

    def _write(self, token: AccessToken) -> None:
        data = {"access_token": token.model_dump(mode="json"), "version": STORAGE_VERSION}
        payload = orjson.dumps(data, option=orjson.OPT_INDENT_2)
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.file_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as f:
            f.write(payload)

    async def load(self) -> AccessToken | None:
        return await asyncio.to_thread(self._read)

    async def save(self, token: AccessToken) -> bool:
        """Save the token, replacing any previous one.

        Raises:
            CredentialsStorageError: If the file cannot be written

        """
        try:
            await asyncio.to_thread(self._write, token)
        except OSError as e:
            raise CredentialsStorageError(
                f"Failed to write token to {self.file_path}: {e}",
                details={"path": str(self.file_path)},
            ) from e
        logger.info(
            "token_saved", path=str(self.file_path), screen_name=token.screen_name
        )
        return True

    async def exists(self) -> bool:
        return self.file_path.exists()

    async def delete(self) -> bool:
        if not self.file_path.exists():
            return False
        try:
            self.file_path.unlink()
        except OSError as e:
            raise CredentialsStorageError(
                f"Failed to delete token file {self.file_path}: {e}",
                details={"path": str(self.file_path)},
            ) from e
        logger.info("token_deleted", path=str(self.file_path))
        return True

    def get_location(self) -> str:
        return str(self.file_path)
