"""Physical filename generation and the temporary-file marker."""
import uuid
from typing import Optional

from .validation import get_filename_extension

TEMP_MARKER = ".temp"


def get_physical_filename(original_filename: Optional[str], temporary: bool = False) -> str:
    """Generate a collision-resistant on-disk name for an upload.

    The name is a UUID4 followed by the original's lower-cased extension,
    with the temporary marker appended after it when *temporary* is set:
    ``3f2c...e1.pdf`` or ``3f2c...e1.pdf.temp``.
    """
    extension = get_filename_extension(original_filename)
    filename = str(uuid.uuid4())
    if extension:
        filename = f"{filename}.{extension.lower()}"
    if temporary:
        filename += TEMP_MARKER
    return filename


def is_temporary(filename: str) -> bool:
    return TEMP_MARKER in filename.rpartition("/")[2]


def strip_temp_marker(filename: str) -> str:
    """Remove the marker from the last path segment only.

    Directory names in a relative path are left alone, so
    ``x.temp/a.pdf.temp`` becomes ``x.temp/a.pdf``.
    """
    directory, sep, name = filename.rpartition("/")
    return directory + sep + name.replace(TEMP_MARKER, "")
