"""Document writers implementing application ports."""

from __future__ import annotations

from pathlib import Path

from raml_oas_converter.errors import OutputWriteError


class FileDocumentWriter:
    """Write converted documents to the local filesystem."""

    def write(self, path: Path, content: str) -> int:
        """Overwrite ``path`` with ``content`` encoded as UTF-8.

        Parameters
        ----------
        path : Path
            Destination file; missing parent directories are created.
        content : str
            Document text written verbatim.

        Returns
        -------
        int
            Number of bytes written.

        Raises
        ------
        OutputWriteError
            If the destination cannot be written.
        """
        payload = content.encode("utf-8")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(payload)
        except OSError as exc:
            raise OutputWriteError(f"Unable to write {path}: {exc}") from exc
        return len(payload)
