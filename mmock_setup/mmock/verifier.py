"""
Installation check for mmock.

Confirms that the mmock binary is reachable through the search path and
that running it with ``-h`` prints the mmock version banner, then publishes
the binary path as the ``mmock-bin`` output.
"""

import logging
import shutil
import subprocess
from pathlib import Path

from mmock_setup.core.exceptions import (
    BannerMismatchError,
    BinaryNotFoundError,
    VerificationError,
)
from mmock_setup.core.workflow import WorkflowContext

logger = logging.getLogger(__name__)

BINARY_NAME = "mmock"
HELP_FLAG = "-h"
VERSION_BANNER = "mmock v"
OUTPUT_NAME = "mmock-bin"


class MMockVerifier:
    """
    Verify the installed mmock binary.

    Example:
        >>> verifier = MMockVerifier(WorkflowContext())
        >>> verifier.verify()
        PosixPath('/tmp/mmock-3.1.6/mmock')
    """

    def __init__(
        self,
        context: WorkflowContext,
        binary_name: str = BINARY_NAME,
        banner: str = VERSION_BANNER,
    ):
        self.context = context
        self.binary_name = binary_name
        self.banner = banner

    def find_binary(self) -> Path:
        """
        Look the binary up on the search path.

        Raises:
            BinaryNotFoundError: If it is not on the search path
        """
        found = shutil.which(self.binary_name, path=self.context.env.get("PATH"))
        if not found:
            raise BinaryNotFoundError(self.binary_name)
        return Path(found)

    def capture_help(self, binary: Path) -> str:
        """
        Run the binary with the help flag and return stdout + stderr.

        The exit code is ignored; some releases exit non-zero after
        printing usage. Bytes that are not valid UTF-8 are replaced.
        """
        try:
            result = subprocess.run(
                [str(binary), HELP_FLAG],
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=dict(self.context.env),
                check=False,
            )
        except OSError as e:
            raise VerificationError(f"Failed to run {binary}: {e}") from e

        return (result.stdout or "") + (result.stderr or "")

    def verify(self) -> Path:
        """
        Check the installed binary and publish its path.

        Returns:
            Absolute path of the verified binary

        Raises:
            BinaryNotFoundError: If the binary is not on the search path
            BannerMismatchError: If the help output lacks the version banner
        """
        binary = self.find_binary()
        output = self.capture_help(binary)

        if self.banner.lower() not in output.lower():
            raise BannerMismatchError(self.banner, output)

        self.context.set_output(OUTPUT_NAME, str(binary))

        logger.info(f"MMock installed: {binary}")
        return binary
